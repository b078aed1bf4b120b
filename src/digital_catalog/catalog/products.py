"""Product catalog: listing, lookup and controlled edits."""

from __future__ import annotations

import logging
from decimal import Decimal

from digital_catalog.core.clock import IClock, WallClock
from digital_catalog.core.errors import ProductNotFound, SlugGenerationError
from digital_catalog.core.interfaces import IContentUnitStore, IProductStore
from digital_catalog.core.models import ChapterSummary, Product, ProductDetail

from .slug import generate_slug

logger = logging.getLogger(__name__)


class ProductCatalog:
    """Read and edit operations on products.

    A product's slug follows its name until the product has content;
    after the first chapter is synced the slug never changes.
    """

    def __init__(
        self,
        products: IProductStore,
        units: IContentUnitStore,
        clock: IClock | None = None,
    ) -> None:
        self._products = products
        self._units = units
        self._clock = clock or WallClock()

    async def list(self, offset: int = 0, limit: int = 10) -> list[Product]:
        """Newest products first."""
        return await self._products.list(offset=offset, limit=limit)

    async def get_by_slug(self, slug: str) -> ProductDetail:
        product = await self._products.get_by_slug(slug)
        if product is None:
            raise ProductNotFound(slug)

        units = await self._units.list_for_product(product.id)
        return ProductDetail(
            product=product,
            chapters=[ChapterSummary(title=u.title, slug=u.slug) for u in units],
        )

    async def add(self, name: str, price: Decimal, github_repo: str) -> Product:
        slug = await generate_slug(self._products, name)
        if not slug:
            raise SlugGenerationError(f"Cannot build a slug from {name!r}")

        product = await self._products.add(
            Product(
                name=name,
                slug=slug,
                price=price,
                github_repo=github_repo,
                created_at=self._clock.now(),
            )
        )
        logger.info("Added product id=%s slug=%s", product.id, slug)
        return product

    async def edit(
        self,
        product_id: str,
        name: str,
        price: Decimal,
        github_repo: str,
    ) -> Product:
        product = await self._products.get(product_id)
        if product is None:
            raise ProductNotFound(product_id)

        new_name: str | None = None
        new_slug: str | None = None
        if name != product.name:
            new_name = name
            has_content = bool(await self._units.list_for_product(product_id))
            if has_content:
                logger.info(
                    "Keeping slug %s for renamed product %s: content exists",
                    product.slug, product_id,
                )
            else:
                new_slug = await generate_slug(self._products, name)
                if not new_slug:
                    raise SlugGenerationError(f"Cannot build a slug from {name!r}")

        return await self._products.update(
            product_id,
            name=new_name,
            slug=new_slug,
            price=price,
            github_repo=github_repo,
        )
