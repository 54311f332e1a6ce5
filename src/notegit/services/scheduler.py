"""Timer driver for periodic sync runs.

Ticks fire at a fixed rate. A tick that arrives while the previous run is
still in flight is skipped rather than queued behind it.
"""

import logging
import threading
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class SyncScheduler:
    """Calls ``job`` every ``interval_seconds`` on a background timer."""

    def __init__(self, job: Callable[[], Any], interval_seconds: float) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._job = job
        self._interval = interval_seconds
        self._timer: Optional[threading.Timer] = None
        self._timer_lock = threading.Lock()
        self._run_lock = threading.Lock()
        self._stopped = threading.Event()
        self.runs = 0
        self.skipped_runs = 0

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def is_running(self) -> bool:
        """True while a job is executing."""
        return self._run_lock.locked()

    def start(self) -> None:
        """Arm the timer; the first tick fires after one interval."""
        self._stopped.clear()
        self._schedule()
        logger.info(f"Sync scheduled every {self._interval:.0f}s")

    def stop(self) -> None:
        """Cancel the pending tick. A run already in flight completes."""
        self._stopped.set()
        with self._timer_lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until :meth:`stop` is called. Returns True if stopped."""
        return self._stopped.wait(timeout)

    def trigger(self) -> bool:
        """Run the job now unless a run is in flight.

        Returns:
            True if the job ran, False if the tick was skipped.
        """
        if not self._run_lock.acquire(blocking=False):
            self.skipped_runs += 1
            logger.warning("Previous sync still running; skipping this tick")
            return False
        try:
            self.runs += 1
            self._job()
        except Exception as e:
            logger.error(f"Sync run failed: {e}", exc_info=True)
        finally:
            self._run_lock.release()
        return True

    def _schedule(self) -> None:
        with self._timer_lock:
            if self._stopped.is_set():
                return
            self._timer = threading.Timer(self._interval, self._tick)
            self._timer.daemon = True
            self._timer.start()

    def _tick(self) -> None:
        # Re-arm first so the rate stays fixed even when a run is slow
        self._schedule()
        self.trigger()
