"""Filesystem and git storage layer for notegit."""

from notegit.storage.directory_reconciler import clean_directory
from notegit.storage.exporter import NoteExporter
from notegit.storage.git_wrapper import GitWrapper
from notegit.storage.note_fetcher import fetch_note_tree

__all__ = [
    "clean_directory",
    "fetch_note_tree",
    "GitWrapper",
    "NoteExporter",
]
