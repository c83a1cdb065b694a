"""Filename sanitization for rendered message names."""

from __future__ import annotations

import re

from mailnamer.errors import ValidationError

ILLEGAL_CHARACTERS = re.compile(r'[<>:"/\\|?*\x00-\x1F\x7F]')
_WHITESPACE_RUN = re.compile(r"\s+")
_WIN_RESERVED_NAMES = {
    "CON",
    "PRN",
    "AUX",
    "NUL",
    *(f"COM{i}" for i in range(1, 10)),
    *(f"LPT{i}" for i in range(1, 10)),
}


def sanitize_filename(name: str, *, replacement: str = "_", max_length: int = 200) -> str:
    """Make an extensionless name safe on Windows and POSIX filesystems.

    Illegal characters become ``replacement``, whitespace runs collapse to one
    space, leading/trailing whitespace and dots are stripped, and the result is
    capped at ``max_length``. Reserved device names left after the cap get a
    leading underscore.
    """
    if ILLEGAL_CHARACTERS.search(replacement):
        raise ValueError(f"replacement {replacement!r} contains illegal filename characters")

    cleaned = ILLEGAL_CHARACTERS.sub(replacement, name)
    cleaned = _WHITESPACE_RUN.sub(" ", cleaned).strip(" .")
    if len(cleaned) > max_length:
        cleaned = cleaned[:max_length].rstrip(" .")
    if cleaned.split(".", 1)[0].upper() in _WIN_RESERVED_NAMES:
        cleaned = f"_{cleaned}"[:max_length].rstrip(" .")

    if not cleaned:
        raise ValidationError(
            what=f"rendered filename {name!r} is empty after sanitization.",
            why="every character was illegal, whitespace, or a dot",
            remediation="adjust the filename template so it produces visible text",
        )
    return cleaned
