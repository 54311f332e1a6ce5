"""One export-and-sync pass.

Stages, in order, all working on the export directory::

    IDLE -> CLEANING_DIRECTORY -> BOOTSTRAPPING -> FETCHING -> EXPORTING
         -> COMMITTING -> PUSHING -> IDLE

A failed clean is reported and the run goes on. A bootstrap that ends
``FATAL`` aborts the run; ``DEGRADED_CONTINUE`` goes on with a warning.
Every later failure is reported and aborts the remaining stages.
"""

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from notegit.config import SyncConfig
from notegit.exceptions import GitError, HostStoreError, StorageError
from notegit.host.base import HostStore
from notegit.host.joplin_client import JoplinClient
from notegit.models.schema import BootstrapStatus, RunResult, SyncState
from notegit.observability import timed_operation
from notegit.services.bootstrapper import RepositoryBootstrapper
from notegit.services.git_sync_service import GitSyncService
from notegit.services.notifier import DisplayFn, Notifier
from notegit.storage.directory_reconciler import clean_directory
from notegit.storage.exporter import NoteExporter
from notegit.storage.git_wrapper import GitWrapper
from notegit.storage.note_fetcher import fetch_note_tree

logger = logging.getLogger(__name__)

NOT_CONFIGURED_MESSAGE = "Please configure the plugin settings."


@dataclass
class SyncCollaborators:
    """External parties a run talks to.

    ``git`` is built from the configuration when not supplied.
    """

    store: HostStore
    notifier: Notifier
    git: Optional[GitWrapper] = None
    sleep: Callable[[float], None] = time.sleep
    clock: Callable[[], datetime] = datetime.now

    @classmethod
    def from_config(
        cls, config: SyncConfig, display: Optional[DisplayFn] = None
    ) -> "SyncCollaborators":
        """Joplin store and notifier for ``config``."""
        return cls(
            store=JoplinClient(config.joplin_api_url, config.joplin_api_token),
            notifier=Notifier(enabled=config.enable_notifications, display=display),
        )


def build_git(config: SyncConfig) -> GitWrapper:
    return GitWrapper(
        config.get_export_dir(),
        executable=config.git_executable_path,
        timeout=config.git_timeout,
        user_name=config.git_user_name,
        user_email=config.git_user_email,
    )


class SyncOrchestrator:
    """Runs the stages of one pass and tracks the current state."""

    def __init__(self, config: SyncConfig, collaborators: SyncCollaborators) -> None:
        self._config = config
        self._collab = collaborators
        self.state = SyncState.IDLE
        self._result = RunResult()

    def _enter(self, state: SyncState) -> None:
        logger.debug(f"Sync state {self.state.value} -> {state.value}")
        self.state = state
        self._result.last_state = state

    def _notify(self, message: str) -> None:
        self._collab.notifier.notify(message)
        self._result.notifications.append(message)

    def _abort(self, message: str) -> RunResult:
        self._notify(message)
        self._result.error = message
        self.state = SyncState.IDLE
        return self._result

    def run(self) -> RunResult:
        self._result = RunResult()
        config = self._config

        if not config.is_configured:
            logger.info(NOT_CONFIGURED_MESSAGE)
            self._notify(NOT_CONFIGURED_MESSAGE)
            self._result.skipped = True
            return self._result

        export_dir = config.get_export_dir()
        git = self._collab.git or build_git(config)

        self._enter(SyncState.CLEANING_DIRECTORY)
        try:
            with timed_operation("clean_directory", directory=export_dir):
                clean_directory(export_dir)
        except StorageError as e:
            logger.error(f"Error clearing the export directory: {e}")
            self._notify(e.message)

        self._enter(SyncState.BOOTSTRAPPING)
        with timed_operation("bootstrap", directory=export_dir) as op:
            bootstrap = RepositoryBootstrapper(
                git, config, sleep=self._collab.sleep
            ).ensure_repository()
            op["status"] = bootstrap.status.value
        self._result.bootstrap = bootstrap
        if bootstrap.status is BootstrapStatus.FATAL:
            return self._abort(f"Error creating Git directory: {bootstrap.error}")
        if bootstrap.status is BootstrapStatus.DEGRADED_CONTINUE:
            logger.warning(f"Continuing with a partially bootstrapped repository: {bootstrap.error}")

        self._enter(SyncState.FETCHING)
        try:
            with timed_operation("fetch") as op:
                tree = fetch_note_tree(self._collab.store)
                op["notes"] = len(tree)
        except HostStoreError as e:
            logger.error(f"Error fetching notes: {e}")
            return self._abort(f"Error fetching notes: {e.message}")

        self._enter(SyncState.EXPORTING)
        try:
            with timed_operation("export", directory=export_dir) as op:
                self._result.export = NoteExporter(export_dir).export(tree)
                op["notes"] = self._result.export.notes_written
        except StorageError as e:
            return self._abort(e.message)

        service = GitSyncService(git, config, clock=self._collab.clock)

        self._enter(SyncState.COMMITTING)
        try:
            with timed_operation("commit"):
                self._result.committed = service.commit_changes()
        except GitError as e:
            return self._abort(f"Error during Git commit: {e.stderr or e.message}")

        self._enter(SyncState.PUSHING)
        try:
            with timed_operation("push"):
                self._result.pushed = service.push_changes()
        except GitError as e:
            return self._abort(f"Error during Git push: {e.stderr or e.message}")

        self.state = SyncState.IDLE
        self._result.success = True
        logger.info(
            "Sync finished: committed=%s pushed=%s",
            self._result.committed,
            self._result.pushed,
        )
        return self._result


def run_once(config: SyncConfig, collaborators: SyncCollaborators) -> RunResult:
    """Run one export-and-sync pass with ``config``."""
    return SyncOrchestrator(config, collaborators).run()
