"""Tests for fetching the note tree from the host store."""

import pytest

from notegit.exceptions import HostStoreError
from notegit.models.schema import NOTE_FIELDS, NOTEBOOK_FIELDS
from notegit.storage.note_fetcher import fetch_all_notes, fetch_note_tree
from tests.fakes import FakeNoteStore


def _notes(count):
    return [
        {"id": f"n{i}", "title": f"Note {i}", "body": str(i), "parent_id": "nb"}
        for i in range(count)
    ]


class TestFetchAllNotes:
    def test_follows_pages_until_has_more_is_false(self):
        store = FakeNoteStore(notes=_notes(5), page_size=2)
        notes = fetch_all_notes(store)
        assert store.note_calls == [1, 2, 3]
        assert [n.id for n in notes] == ["n0", "n1", "n2", "n3", "n4"]

    def test_single_empty_page(self):
        store = FakeNoteStore(notes=[], page_size=2)
        assert fetch_all_notes(store) == []
        assert store.note_calls == [1]

    def test_keeps_duplicates_and_host_order(self):
        notes = _notes(2) + _notes(1)
        store = FakeNoteStore(notes=notes, page_size=10)
        assert [n.id for n in fetch_all_notes(store)] == ["n0", "n1", "n0"]

    def test_host_failure_propagates(self):
        store = FakeNoteStore(notes=_notes(5), page_size=2, fail_on_page=2)
        with pytest.raises(HostStoreError):
            fetch_all_notes(store)


class TestFetchNoteTree:
    def test_requests_fixed_projections(self, sample_store):
        fetch_note_tree(sample_store)
        assert sample_store.notebook_calls == [NOTEBOOK_FIELDS]
        assert NOTE_FIELDS == ["id", "title", "body", "parent_id", "updated_time"]

    def test_builds_indexes(self, sample_store):
        tree = fetch_note_tree(sample_store)
        assert len(tree) == 4
        assert [nb.id for nb in tree.child_notebooks("")] == ["nb-work", "nb-home"]
        assert [nb.id for nb in tree.child_notebooks("nb-work")] == ["nb-proj"]
        assert [n.id for n in tree.notes_in("nb-proj")] == ["n3"]
        assert [n.id for n in tree.orphaned_notes()] == ["n4"]
