"""Store-backed ChapterSync: upserts one content unit per parsed file."""

from __future__ import annotations

import logging

from digital_catalog.core.clock import IClock, WallClock
from digital_catalog.core.interfaces import IContentUnitStore
from digital_catalog.core.models import ContentUnit, ParsedChapter, Product

from .selection import default_order, default_title

logger = logging.getLogger(__name__)


class StoreChapterSync:
    """Upserts content units keyed by (product, path).

    Title and order come from front matter when present, otherwise they
    are derived from the file name.  An existing unit keeps its id and
    ``created_at``.
    """

    def __init__(self, store: IContentUnitStore, clock: IClock | None = None) -> None:
        self._store = store
        self._clock = clock or WallClock()

    async def apply(self, product: Product, parsed: ParsedChapter) -> ContentUnit:
        now = self._clock.now()
        existing = await self._store.get(product.id, parsed.path)

        fields = {
            "title": parsed.title or default_title(parsed.path),
            "order": parsed.order if parsed.order is not None else default_order(parsed.path),
            "slug": parsed.path.removesuffix(".md"),
            "body": parsed.body,
            "metadata": parsed.metadata,
            "updated_at": now,
        }

        if existing is not None:
            unit = existing.model_copy(update=fields)
        else:
            unit = ContentUnit(
                product_id=product.id,
                path=parsed.path,
                created_at=now,
                **fields,
            )

        saved = await self._store.upsert(unit)
        logger.debug(
            "Upserted content unit product=%s path=%s order=%d",
            product.id, parsed.path, saved.order,
        )
        return saved
