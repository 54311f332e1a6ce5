"""Materializing a note tree as a directory tree of markdown files.

Each notebook becomes a directory named after its sanitized title, nested
exactly like the notebook hierarchy. Each note becomes
``<sanitized title>.md`` directly inside its notebook's directory and holds
the raw note body.
"""
import logging
from pathlib import Path
from typing import List, Tuple, Union

from notegit.exceptions import ExportError
from notegit.models.schema import ROOT_PARENT_ID, ExportResult, Note, Notebook, NoteTree
from notegit.utils import sanitize_filename

logger = logging.getLogger(__name__)

NOTE_SUFFIX = ".md"


class NoteExporter:
    """Writes a :class:`NoteTree` below ``root_dir``.

    Args:
        root_dir: The export directory. It is expected to exist (the
            directory reconciler creates it) but is created when missing.
    """

    def __init__(self, root_dir: Union[str, Path]) -> None:
        self.root_dir = Path(root_dir)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def export(self, tree: NoteTree) -> ExportResult:
        """Write every note reachable from the root notebooks.

        Notes whose notebook is absent from the tree (or hangs below such a
        notebook) are skipped and counted in ``orphaned_notes``.

        Raises:
            ExportError: On the first filesystem failure or a note body that
                cannot be encoded as UTF-8. Files written so far stay on disk.
        """
        result = ExportResult()
        stack: List[Tuple[Notebook, Path]] = [
            (nb, self.root_dir) for nb in tree.child_notebooks(ROOT_PARENT_ID)
        ]
        current = self.root_dir

        try:
            self.root_dir.mkdir(parents=True, exist_ok=True)
            while stack:
                notebook, parent_dir = stack.pop()
                notebook_dir = parent_dir / self.directory_name(notebook)
                current = notebook_dir
                notebook_dir.mkdir(parents=True, exist_ok=True)
                result.notebooks_written += 1

                for note in tree.notes_in(notebook.id):
                    current = self.write_note(note, notebook_dir)
                    result.notes_written += 1

                for child in tree.child_notebooks(notebook.id):
                    stack.append((child, notebook_dir))
        except (OSError, UnicodeError) as e:
            logger.error(f"Error exporting notes at {current}: {e}")
            raise ExportError(
                f"Error exporting notes: {e}",
                path=str(current),
                written_notes=result.notes_written,
                original_error=e,
            ) from e

        orphaned = tree.orphaned_notes()
        result.orphaned_notes = len(orphaned)
        if orphaned:
            logger.warning(
                "%d note(s) belong to no exported notebook and were skipped: %s",
                len(orphaned),
                ", ".join(n.id for n in orphaned[:10]),
            )

        logger.info(
            f"Exported {result.notes_written} notes in "
            f"{result.notebooks_written} notebooks to {self.root_dir}"
        )
        return result

    def write_note(self, note: Note, notebook_dir: Path) -> Path:
        """Write ``note`` into ``notebook_dir``, overwriting any previous file."""
        note_path = notebook_dir / f"{self.file_stem(note)}{NOTE_SUFFIX}"
        with open(note_path, "w", encoding="utf-8", newline="") as f:
            f.write(note.body)
        logger.debug(f"Wrote {note_path} (updated {note.updated_at or 'unknown'})")
        return note_path

    # ------------------------------------------------------------------
    # Naming
    # ------------------------------------------------------------------

    @staticmethod
    def directory_name(notebook: Notebook) -> str:
        """Sanitized notebook title, or its id when nothing survives."""
        return sanitize_filename(notebook.title) or sanitize_filename(notebook.id)

    @staticmethod
    def file_stem(note: Note) -> str:
        """Sanitized note title, or its id when nothing survives."""
        return sanitize_filename(note.title) or sanitize_filename(note.id)
