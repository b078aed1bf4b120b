"""Allow-list of repository files that become chapters.

Only top-level regular files named ``introduction.md`` or
``chapter-<N>.md`` (N a positive integer) are synced.  Everything else in
the repository root is ignored.
"""

from __future__ import annotations

import re

from digital_catalog.core.enums import EntryType
from digital_catalog.core.models import RepoEntry

INTRODUCTION_PATH = "introduction.md"

_CHAPTER_RE = re.compile(r"chapter-(?P<number>[1-9][0-9]*)\.md")


def chapter_number(path: str) -> int | None:
    """Return N for ``chapter-N.md``, else ``None``."""
    match = _CHAPTER_RE.fullmatch(path)
    if match is None:
        return None
    return int(match.group("number"))


def is_syncable(entry: RepoEntry) -> bool:
    if entry.type != EntryType.FILE:
        return False
    return entry.path == INTRODUCTION_PATH or chapter_number(entry.path) is not None


def select_syncable(entries: list[RepoEntry]) -> list[RepoEntry]:
    return [e for e in entries if is_syncable(e)]


def default_order(path: str) -> int:
    """Introduction sorts first; ``chapter-N`` sorts at N + 1."""
    if path == INTRODUCTION_PATH:
        return 1
    number = chapter_number(path)
    if number is None:
        raise ValueError(f"Not a chapter path: {path}")
    return number + 1


def default_title(path: str) -> str:
    if path == INTRODUCTION_PATH:
        return "Introduction"
    number = chapter_number(path)
    if number is None:
        raise ValueError(f"Not a chapter path: {path}")
    return f"Chapter {number}"
