"""Fetching the complete notebook hierarchy and note set from the host."""

import logging
from typing import List

from notegit.host.base import HostStore
from notegit.models.schema import NOTE_FIELDS, NOTEBOOK_FIELDS, Note, NoteTree

logger = logging.getLogger(__name__)


def fetch_all_notes(store: HostStore) -> List[Note]:
    """Page through the host's notes until it reports no further pages.

    Notes are kept in host order; nothing is filtered, sorted or deduplicated.
    """
    notes: List[Note] = []
    page = 1
    while True:
        result = store.list_notes(NOTE_FIELDS, page=page)
        notes.extend(result.items)
        if not result.has_more:
            break
        page += 1
    logger.debug(f"Fetched {len(notes)} notes in {page} page(s)")
    return notes


def fetch_note_tree(store: HostStore) -> NoteTree:
    """Fetch every notebook (one call) and every note (paginated).

    Raises:
        HostStoreError: Propagated from the store.
    """
    notebooks = store.list_notebooks(NOTEBOOK_FIELDS)
    notes = fetch_all_notes(store)
    logger.info(f"Fetched {len(notebooks)} notebooks and {len(notes)} notes")
    return NoteTree(notebooks, notes)
