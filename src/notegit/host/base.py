"""Interface of the host application's note store."""

from typing import List, Protocol, Sequence, runtime_checkable

from notegit.models.schema import Notebook, NotePage


@runtime_checkable
class HostStore(Protocol):
    """Read-only access to the host's notebooks and notes.

    Implementations raise :class:`notegit.exceptions.HostStoreError` when the
    host fails or answers with an unexpected shape.
    """

    def list_notebooks(self, fields: Sequence[str]) -> List[Notebook]:
        """Return every notebook, projected to ``fields``."""
        ...

    def list_notes(self, fields: Sequence[str], page: int) -> NotePage:
        """Return one page of notes (1-based), projected to ``fields``."""
        ...
