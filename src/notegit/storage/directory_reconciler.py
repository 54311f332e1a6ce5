"""Clearing the export directory before a full re-export."""

import logging
import shutil
from pathlib import Path
from typing import FrozenSet, Union

from notegit.exceptions import ErrorCode, StorageError

logger = logging.getLogger(__name__)

# Entries that survive a clean: git metadata and its ignore rules
PRESERVED_ENTRIES: FrozenSet[str] = frozenset({".git", ".gitignore"})


def clean_directory(directory: Union[str, Path]) -> int:
    """Remove every previous export from ``directory``.

    The directory (and its parents) is created when missing. Otherwise each
    immediate child except ``.git`` and ``.gitignore`` is removed: directories
    recursively, files and symlinks by unlinking. A symlink to a directory is
    unlinked, never followed.

    Args:
        directory: The export directory.

    Returns:
        Number of top-level entries removed.

    Raises:
        StorageError: If the directory cannot be created, listed or cleared.
    """
    root = Path(directory)
    removed = 0
    try:
        if not root.exists():
            root.mkdir(parents=True)
            logger.info(f"Created export directory {root}")
            return 0

        for child in root.iterdir():
            if child.name in PRESERVED_ENTRIES:
                continue
            if child.is_dir() and not child.is_symlink():
                shutil.rmtree(child)
            else:
                child.unlink()
            removed += 1
    except OSError as e:
        raise StorageError(
            f"Error clearing the export directory: {e}",
            operation="clean",
            path=str(root),
            code=ErrorCode.DIRECTORY_CLEAN_FAILED,
            original_error=e,
        ) from e

    logger.debug(f"Removed {removed} entries from {root}")
    return removed
