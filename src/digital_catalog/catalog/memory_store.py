"""In-memory product and content unit stores.

Used in tests and local runs.  Not persistent and not shared across
processes.
"""

from __future__ import annotations

from decimal import Decimal

from digital_catalog.core.errors import CatalogEditError, ProductNotFound
from digital_catalog.core.models import ContentUnit, Product


class MemoryProductStore:
    """Products keyed by id with a unique slug index."""

    def __init__(self, products: list[Product] | None = None) -> None:
        self._products: dict[str, Product] = {}
        for product in products or []:
            self._products[product.id] = product

    async def get(self, product_id: str) -> Product | None:
        return self._products.get(product_id)

    async def get_by_slug(self, slug: str) -> Product | None:
        for product in self._products.values():
            if product.slug == slug:
                return product
        return None

    async def slug_exists(self, slug: str) -> bool:
        return any(p.slug == slug for p in self._products.values())

    async def list(self, *, offset: int = 0, limit: int = 10) -> list[Product]:
        ordered = sorted(
            self._products.values(), key=lambda p: p.created_at, reverse=True,
        )
        return ordered[offset:offset + limit]

    async def add(self, product: Product) -> Product:
        if await self.slug_exists(product.slug):
            raise CatalogEditError(f"Slug already in use: {product.slug}")
        self._products[product.id] = product
        return product

    async def update(
        self,
        product_id: str,
        *,
        name: str | None = None,
        slug: str | None = None,
        price: Decimal | None = None,
        github_repo: str | None = None,
    ) -> Product:
        product = self._products.get(product_id)
        if product is None:
            raise ProductNotFound(product_id)

        changes = {
            k: v
            for k, v in (
                ("name", name),
                ("slug", slug),
                ("price", price),
                ("github_repo", github_repo),
            )
            if v is not None
        }
        if slug is not None and slug != product.slug and await self.slug_exists(slug):
            raise CatalogEditError(f"Slug already in use: {slug}")

        updated = product.model_copy(update=changes)
        self._products[product_id] = updated
        return updated

    async def update_last_commit(self, product_id: str, sha: str) -> None:
        product = self._products.get(product_id)
        if product is None:
            raise ProductNotFound(product_id)
        self._products[product_id] = product.model_copy(
            update={"github_last_commit_sha": sha},
        )


class MemoryContentUnitStore:
    """Content units keyed by (product_id, path)."""

    def __init__(self) -> None:
        self._units: dict[tuple[str, str], ContentUnit] = {}
        self.write_count: int = 0

    async def get(self, product_id: str, path: str) -> ContentUnit | None:
        return self._units.get((product_id, path))

    async def upsert(self, unit: ContentUnit) -> ContentUnit:
        self._units[(unit.product_id, unit.path)] = unit
        self.write_count += 1
        return unit

    async def list_for_product(self, product_id: str) -> list[ContentUnit]:
        units = [u for (pid, _), u in self._units.items() if pid == product_id]
        return sorted(units, key=lambda u: u.order)
