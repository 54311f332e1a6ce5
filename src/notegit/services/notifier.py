"""Best-effort reporting of sync outcomes to the user."""

import logging
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

# A blocking message display supplied by the host (e.g. a modal dialog)
DisplayFn = Callable[[str], None]


class Notifier:
    """Routes messages to the host display or to the log.

    When notifications are enabled and a display is available the message is
    shown there. Otherwise, or when the display itself fails, it becomes a
    log line. Every message is remembered in :attr:`messages`.
    """

    def __init__(self, enabled: bool = True, display: Optional[DisplayFn] = None) -> None:
        self.enabled = enabled
        self._display = display
        self.messages: List[str] = []

    def notify(self, message: str) -> None:
        self.messages.append(message)
        if self.enabled and self._display is not None:
            try:
                self._display(message)
                return
            except Exception as e:
                logger.warning(f"Notification display failed: {e}")
        logger.warning(message)
