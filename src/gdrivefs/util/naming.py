"""Path splitting and name sanitization shared by lookups and display paths."""

from __future__ import annotations

import posixpath
import re

PATH_SEPARATORS: tuple[str, ...] = ("/", "\\")

# Separators break path parsing; single quotes delimit Drive query literals.
_UNSAFE_NAME_CHARS = re.compile(r"[/\\']")
_SEPARATORS_RE = re.compile(r"[/\\]+")

FILLER_CHAR: str = "-"


def is_path_separator(char: str) -> bool:
    return char in PATH_SEPARATORS


def sanitize_name(name: str) -> str:
    """
    Replace path separators and single quotes with a filler character.

    The substitution is lossy. It is applied both when a display path is built
    from a remote name and when a lookup is built from a path segment, so a
    path read back from the filesystem resolves to the same entry.
    """
    return _UNSAFE_NAME_CHARS.sub(FILLER_CHAR, name)


def split_path(path: str) -> list[str]:
    """
    Split a path on '/' and '\\'.

    Consecutive separators collapse, so no empty segment is ever returned:
        "a//b\\c/" -> ["a", "b", "c"]
        "" and "/" -> []
    """
    return [part for part in _SEPARATORS_RE.split(path) if part]


def join_path(*parts: str) -> str:
    """Join path segments with '/', ignoring empty ones."""
    non_empty = [p for p in parts if p]
    if not non_empty:
        return ""
    return posixpath.join(*non_empty)


def join_sanitized(parts: list[str]) -> str:
    """Join path segments after sanitizing each of them."""
    return join_path(*(sanitize_name(p) for p in parts))
