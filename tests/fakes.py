"""In-memory stand-ins for the host note store and notification display.

Both record every call so tests can assert on exactly what the sync run
asked of its collaborators.
"""
from typing import Any, Dict, List, Optional, Sequence

from notegit.exceptions import HostStoreError
from notegit.models.schema import Note, Notebook, NotePage


class FakeNoteStore:
    """Host store serving fixed notebooks and notes, paginated."""

    def __init__(
        self,
        notebooks: Optional[List[Dict[str, Any]]] = None,
        notes: Optional[List[Dict[str, Any]]] = None,
        page_size: int = 2,
        fail_on_page: Optional[int] = None,
    ) -> None:
        self._notebooks = [Notebook.model_validate(nb) for nb in notebooks or []]
        self._notes = [Note.model_validate(n) for n in notes or []]
        self._page_size = page_size
        self._fail_on_page = fail_on_page
        self.notebook_calls: List[List[str]] = []
        self.note_calls: List[int] = []

    @property
    def call_count(self) -> int:
        return len(self.notebook_calls) + len(self.note_calls)

    def list_notebooks(self, fields: Sequence[str]) -> List[Notebook]:
        self.notebook_calls.append(list(fields))
        return list(self._notebooks)

    def list_notes(self, fields: Sequence[str], page: int) -> NotePage:
        self.note_calls.append(page)
        if page == self._fail_on_page:
            raise HostStoreError(f"page {page} unavailable", resource="notes")
        start = (page - 1) * self._page_size
        items = self._notes[start:start + self._page_size]
        return NotePage(
            items=items, has_more=start + self._page_size < len(self._notes)
        )


class RecordingDisplay:
    """Notification display that remembers what it was asked to show."""

    def __init__(self, fail: bool = False) -> None:
        self.shown: List[str] = []
        self._fail = fail

    def __call__(self, message: str) -> None:
        if self._fail:
            raise RuntimeError("dialog unavailable")
        self.shown.append(message)
