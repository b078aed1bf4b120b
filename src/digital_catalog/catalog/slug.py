"""URL slug generation with uniqueness against the product store."""

from __future__ import annotations

import re
import unicodedata

from digital_catalog.core.interfaces import IProductStore

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    """``"Builder Book: 2nd Ed."`` -> ``"builder-book-2nd-ed"``."""
    ascii_text = (
        unicodedata.normalize("NFKD", text)
        .encode("ascii", "ignore")
        .decode("ascii")
    )
    return _NON_ALNUM_RE.sub("-", ascii_text.lower()).strip("-")


async def generate_slug(store: IProductStore, name: str) -> str:
    """Return a slug for *name* not yet used by any product.

    Taken slugs get a numeric suffix: ``book``, ``book-1``, ``book-2`` ...
    Returns ``""`` when *name* has no sluggable characters.
    """
    base = slugify(name)
    if not base:
        return ""

    candidate = base
    suffix = 0
    while await store.slug_exists(candidate):
        suffix += 1
        candidate = f"{base}-{suffix}"
    return candidate
