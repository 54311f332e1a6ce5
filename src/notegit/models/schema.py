"""Data models for notegit."""

import datetime
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Set

from pydantic import BaseModel, ConfigDict

# Parent id of top-level notebooks (the synthetic root of the tree)
ROOT_PARENT_ID = ""

NOTEBOOK_FIELDS = ["id", "title", "parent_id"]
NOTE_FIELDS = ["id", "title", "body", "parent_id", "updated_time"]


class Notebook(BaseModel):
    """A folder-like container in the host's note hierarchy."""

    model_config = ConfigDict(frozen=True, extra="ignore", coerce_numbers_to_str=True)

    id: str
    title: str = ""
    parent_id: str = ROOT_PARENT_ID


class Note(BaseModel):
    """A text document belonging to exactly one notebook."""

    model_config = ConfigDict(frozen=True, extra="ignore", coerce_numbers_to_str=True)

    id: str
    title: str = ""
    body: str = ""
    parent_id: str = ROOT_PARENT_ID
    # Host timestamp in milliseconds since the epoch
    updated_time: Optional[int] = None

    @property
    def updated_at(self) -> Optional[datetime.datetime]:
        if self.updated_time is None:
            return None
        return datetime.datetime.fromtimestamp(
            self.updated_time / 1000, tz=datetime.timezone.utc
        )


class NotePage(BaseModel):
    """One page of a paginated host listing."""

    items: List[Note]
    has_more: bool = False


class NoteTree:
    """Notebooks and notes indexed by id and by parent id.

    The indexes are built once so the export walk never rescans the flat
    lists returned by the host.
    """

    def __init__(self, notebooks: List[Notebook], notes: List[Note]) -> None:
        self.notebooks = list(notebooks)
        self.notes = list(notes)
        self.notebooks_by_id: Dict[str, Notebook] = {nb.id: nb for nb in self.notebooks}
        self.notes_by_id: Dict[str, Note] = {n.id: n for n in self.notes}
        self._child_notebooks: Dict[str, List[Notebook]] = defaultdict(list)
        self._notes_by_parent: Dict[str, List[Note]] = defaultdict(list)
        for notebook in self.notebooks:
            self._child_notebooks[notebook.parent_id].append(notebook)
        for note in self.notes:
            self._notes_by_parent[note.parent_id].append(note)

    def child_notebooks(self, parent_id: str) -> List[Notebook]:
        return self._child_notebooks.get(parent_id, [])

    def notes_in(self, notebook_id: str) -> List[Note]:
        return self._notes_by_parent.get(notebook_id, [])

    def reachable_notebook_ids(self) -> Set[str]:
        """Ids of notebooks reachable from the root."""
        seen: Set[str] = set()
        stack = [ROOT_PARENT_ID]
        while stack:
            parent_id = stack.pop()
            for child in self.child_notebooks(parent_id):
                if child.id not in seen:
                    seen.add(child.id)
                    stack.append(child.id)
        return seen

    def orphaned_notes(self) -> List[Note]:
        """Notes whose notebook is missing or not reachable from the root."""
        reachable = self.reachable_notebook_ids()
        return [n for n in self.notes if n.parent_id not in reachable]

    def __len__(self) -> int:
        return len(self.notes)


class BootstrapStatus(Enum):
    """Outcome of making sure the export directory is a git repository."""

    READY = "ready"
    DEGRADED_CONTINUE = "degraded_continue"
    FATAL = "fatal"


class BootstrapAction(Enum):
    EXISTING = "existing"
    INIT = "init"
    CLONE = "clone"


@dataclass
class BootstrapResult:
    """What the bootstrapper did and whether the run may continue."""

    status: BootstrapStatus
    action: BootstrapAction
    error: Optional[str] = None

    @property
    def can_continue(self) -> bool:
        return self.status is not BootstrapStatus.FATAL


@dataclass
class ExportResult:
    """Counts from one export walk."""

    notebooks_written: int = 0
    notes_written: int = 0
    orphaned_notes: int = 0


class SyncState(Enum):
    """Stages of one orchestration run."""

    IDLE = "idle"
    CLEANING_DIRECTORY = "cleaning_directory"
    BOOTSTRAPPING = "bootstrapping"
    FETCHING = "fetching"
    EXPORTING = "exporting"
    COMMITTING = "committing"
    PUSHING = "pushing"


@dataclass
class RunResult:
    """Outcome of one orchestration run.

    Attributes:
        success: True when every stage completed
        skipped: True when the run never started (missing settings)
        last_state: The last stage entered before returning to idle
        bootstrap: Result of the bootstrap stage, if it ran
        export: Counts from the export stage, if it ran
        committed: Whether a commit was created
        pushed: Whether a push happened
        error: Message of the failure that ended the run
        notifications: Messages routed to the notifier during the run
    """

    success: bool = False
    skipped: bool = False
    last_state: SyncState = SyncState.IDLE
    bootstrap: Optional[BootstrapResult] = None
    export: Optional[ExportResult] = None
    committed: bool = False
    pushed: bool = False
    error: Optional[str] = None
    notifications: List[str] = field(default_factory=list)
