"""Making sure the export directory is a working git repository.

Three cases, checked on every run:

- ``.git`` already present: nothing to do.
- no remote URL configured: ``git init`` in place.
- remote URL configured: clone it, let it settle, switch to the configured
  branch and pull it.

Failures never raise. They are logged and reported through
:class:`BootstrapResult` so the orchestrator decides whether to go on.
"""

import logging
import time
from typing import Callable, Optional

from notegit.config import SyncConfig
from notegit.exceptions import GitError
from notegit.models.schema import BootstrapAction, BootstrapResult, BootstrapStatus
from notegit.storage.git_wrapper import GitWrapper

logger = logging.getLogger(__name__)


class RepositoryBootstrapper:
    """Idempotent init-or-clone of the export directory."""

    def __init__(
        self,
        git: GitWrapper,
        config: SyncConfig,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> None:
        self._git = git
        self._config = config
        self._sleep = sleep or time.sleep

    def ensure_repository(self) -> BootstrapResult:
        if self._git.is_repository():
            logger.debug("Git repository already exists at %s", self._git.repo_path)
            return BootstrapResult(BootstrapStatus.READY, BootstrapAction.EXISTING)

        logger.info("Git directory not found at %s", self._git.repo_path)
        if not self._config.git_repo_url:
            return self._init()
        return self._clone()

    def _init(self) -> BootstrapResult:
        try:
            self._git.init()
        except GitError as e:
            logger.error(f"Error creating Git directory: {e}")
            return BootstrapResult(BootstrapStatus.FATAL, BootstrapAction.INIT, str(e))
        return BootstrapResult(BootstrapStatus.READY, BootstrapAction.INIT)

    def _clone(self) -> BootstrapResult:
        url = self._config.git_repo_url
        branch = self._config.branch_name
        try:
            self._git.clone(url)
        except GitError as e:
            logger.error(f"Error cloning {url}: {e}")
            return BootstrapResult(BootstrapStatus.FATAL, BootstrapAction.CLONE, str(e))

        if self._config.clone_settle_seconds > 0:
            self._sleep(self._config.clone_settle_seconds)

        try:
            self._git.checkout_or_create(branch)
            self._git.pull(branch)
        except GitError as e:
            # The clone exists; only reconciling with the remote branch failed
            # (typically because the branch is not on the remote yet).
            logger.warning(f"Clone of {url} is usable but not reconciled with {branch}: {e}")
            return BootstrapResult(
                BootstrapStatus.DEGRADED_CONTINUE, BootstrapAction.CLONE, str(e)
            )

        logger.info("Git clone successful.")
        return BootstrapResult(BootstrapStatus.READY, BootstrapAction.CLONE)
