"""Utility functions for notegit."""

import re
import unicodedata
from typing import Optional

# Emoji, dingbats, private use area and pictographic symbols.
_PICTOGRAPH_PATTERN = re.compile(
    "["
    "\u2011-\u26ff"
    "\u2700-\u27bf"
    "\ue000-\uf8ff"
    "\U0001f000-\U0001faff"
    "]"
)
_DISALLOWED_PATTERN = re.compile(r"[^A-Za-z0-9_\-]")
_SPACE_RUN_PATTERN = re.compile(r" +")


def sanitize_filename(title: Optional[str]) -> str:
    """Map an arbitrary note or notebook title to a safe path segment.

    Accents are decomposed and their combining marks dropped, emoji and
    pictographs are removed, and anything outside ``[A-Za-z0-9_-]`` becomes a
    space. Space runs collapse to one and the result is trimmed.

    Examples:
        "Café 🎉 Notes!" -> "Cafe Notes"
        "a/b\\c" -> "a b c"
        "🎉" -> ""

    Two titles that differ only in stripped characters map to the same name.

    Args:
        title: The title to sanitize. ``None`` is treated as empty.

    Returns:
        The sanitized segment, possibly empty. Never contains a path separator.
    """
    if not title:
        return ""

    decomposed = unicodedata.normalize("NFD", title)
    result = "".join(c for c in decomposed if not unicodedata.combining(c))
    result = _PICTOGRAPH_PATTERN.sub("", result)
    result = _DISALLOWED_PATTERN.sub(" ", result)
    result = _SPACE_RUN_PATTERN.sub(" ", result)
    return result.strip(" ")
