"""Commit and push stages of a sync run.

Both stages work on the export directory through :class:`GitWrapper`.
Failures are logged together with git's stderr and re-raised so the
orchestrator aborts the rest of the run; the next tick is the retry.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from notegit.config import SyncConfig
from notegit.exceptions import ErrorCode, GitError
from notegit.storage.git_wrapper import GitWrapper

logger = logging.getLogger(__name__)

REMOTE_NAME = "origin"
# yyyy-MM-dd_HH-mm-ss
COMMIT_TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"


def commit_message(now: Optional[datetime] = None) -> str:
    """Commit message stamped with the local time."""
    stamp = (now or datetime.now()).strftime(COMMIT_TIMESTAMP_FORMAT)
    return f"Exported on {stamp}"


class GitSyncService:
    """Stages, commits and force-pushes the export directory."""

    def __init__(
        self,
        git: GitWrapper,
        config: SyncConfig,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._git = git
        self._config = config
        self._clock = clock or datetime.now

    @property
    def branch(self) -> str:
        return self._config.branch_name

    def commit_changes(self) -> bool:
        """Checkout the branch, stage everything and commit if anything changed.

        Returns:
            True if a commit was created, False when there was nothing to commit.

        Raises:
            GitError: If any git step fails.
        """
        try:
            self._git.checkout_or_create(self.branch)
            logger.info("Git checkout successful.")
            self._git.add_all()
            logger.info("Git add successful.")
            status = self._git.status()
            logger.debug("Git status output: %s", status)

            if not status.strip():
                logger.info("Nothing to commit.")
                return False

            self._git.commit(commit_message(self._clock()))
            logger.info("Git commit successful.")
            return True
        except GitError as e:
            logger.error(f"Error during Git commit: {e.message}")
            logger.error(f"Full error output: {e.stderr or e}")
            if e.code is ErrorCode.GIT_COMMAND_FAILED:
                e.code = ErrorCode.GIT_COMMIT_FAILED
            raise

    def push_changes(self) -> bool:
        """Make sure ``origin`` exists and force-push the branch to it.

        Returns:
            True if a push happened, False when the repository is local-only
            (no ``origin`` and no remote URL configured).

        Raises:
            GitError: If listing remotes, adding the remote or pushing fails.
        """
        try:
            if not self._git.has_remote(REMOTE_NAME):
                if not self._config.git_repo_url:
                    logger.info("No remote configured; skipping push.")
                    return False
                self._git.add_remote(self._config.git_repo_url, REMOTE_NAME)
                logger.info("Git remote add successful.")

            self._git.push_force(self.branch, REMOTE_NAME)
            logger.info("Git push successful.")
            return True
        except GitError as e:
            logger.error(f"Error during Git push: {e}")
            if e.code is ErrorCode.GIT_COMMAND_FAILED:
                e.code = ErrorCode.GIT_PUSH_FAILED
            raise
