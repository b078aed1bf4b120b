"""Transport decoding and front matter parsing for repository files.

Repository files arrive base64-encoded.  After decoding, an optional YAML
block delimited by ``---`` lines at the very top is split off as metadata;
the remainder is the markdown body.
"""

from __future__ import annotations

import base64
import binascii
import re
from typing import Any

import yaml

from digital_catalog.core.errors import ContentDecodeError
from digital_catalog.core.models import ParsedChapter

# Opening delimiter on the first line, closing delimiter on its own line.
_FRONT_MATTER_RE = re.compile(
    r"\A(?:\ufeff)?---[ \t]*\r?\n(?P<meta>.*?)(?:\r?\n)?^---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL | re.MULTILINE,
)


def decode_transport(raw: bytes | str) -> str:
    """Decode base64 transport content into UTF-8 text."""
    try:
        return base64.b64decode(raw).decode("utf-8")
    except (binascii.Error, ValueError) as exc:
        raise ContentDecodeError(f"Invalid transport encoding: {exc}") from exc


def split_front_matter(text: str) -> tuple[dict[str, Any], str]:
    """Return ``(metadata, body)``.  Text without front matter has empty metadata."""
    match = _FRONT_MATTER_RE.match(text)
    if match is None:
        return {}, text

    try:
        meta = yaml.safe_load(match.group("meta")) or {}
    except yaml.YAMLError as exc:
        raise ContentDecodeError(f"Malformed front matter: {exc}") from exc
    if not isinstance(meta, dict):
        raise ContentDecodeError(
            f"Front matter must be a mapping, got {type(meta).__name__}"
        )
    return meta, text[match.end():]


def _as_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def parse_chapter(path: str, raw: bytes | str) -> ParsedChapter:
    """Decode, split, and attach *path* to a fetched repository file."""
    meta, body = split_front_matter(decode_transport(raw))
    title = meta.get("title")
    return ParsedChapter(
        path=path,
        title=str(title) if title is not None else None,
        order=_as_int(meta.get("order")),
        metadata=meta,
        body=body,
    )
