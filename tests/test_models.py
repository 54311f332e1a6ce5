"""Tests for the notebook and note models."""

import pytest
from pydantic import ValidationError

from notegit.models.schema import (
    BootstrapAction,
    BootstrapResult,
    BootstrapStatus,
    Note,
    Notebook,
    NotePage,
    NoteTree,
)


class TestNote:
    def test_unknown_fields_ignored(self):
        note = Note.model_validate(
            {"id": "n1", "title": "T", "body": "b", "parent_id": "f", "is_todo": 0}
        )
        assert note.id == "n1"
        assert not hasattr(note, "is_todo")

    def test_numeric_ids_become_strings(self):
        assert Notebook.model_validate({"id": 7, "title": "A"}).id == "7"

    def test_frozen(self):
        note = Note(id="n1", title="T")
        with pytest.raises(ValidationError):
            note.title = "changed"

    def test_missing_timestamp(self):
        assert Note(id="n1").updated_at is None

    def test_page_requires_items(self):
        with pytest.raises(ValidationError):
            NotePage.model_validate({"has_more": False})


class TestNoteTree:
    def test_cycle_is_not_reachable(self):
        tree = NoteTree(
            notebooks=[
                Notebook(id="a", title="A", parent_id="b"),
                Notebook(id="b", title="B", parent_id="a"),
                Notebook(id="c", title="C"),
            ],
            notes=[Note(id="n1", parent_id="a"), Note(id="n2", parent_id="c")],
        )

        assert tree.reachable_notebook_ids() == {"c"}
        assert [n.id for n in tree.orphaned_notes()] == ["n1"]
        assert len(tree) == 2

    def test_lookups(self):
        tree = NoteTree(
            notebooks=[Notebook(id="a", title="A")],
            notes=[Note(id="n1", parent_id="a")],
        )
        assert tree.notebooks_by_id["a"].title == "A"
        assert [n.id for n in tree.notes_in("a")] == ["n1"]
        assert tree.child_notebooks("missing") == []


class TestBootstrapResult:
    @pytest.mark.parametrize(
        "status, expected",
        [
            (BootstrapStatus.READY, True),
            (BootstrapStatus.DEGRADED_CONTINUE, True),
            (BootstrapStatus.FATAL, False),
        ],
    )
    def test_can_continue(self, status, expected):
        assert BootstrapResult(status, BootstrapAction.CLONE).can_continue is expected
