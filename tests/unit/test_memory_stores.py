"""Test in-memory store invariants."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from digital_catalog.catalog.memory_store import MemoryContentUnitStore, MemoryProductStore
from digital_catalog.commerce.ledger import MemoryOwnershipStore, MemoryPurchaseLedger
from digital_catalog.core.errors import AlreadyPurchased, CatalogEditError, ProductNotFound
from digital_catalog.core.models import ContentUnit, PurchaseRecord, Receipt


def _record(user_id="u1", product_id="p1") -> PurchaseRecord:
    return PurchaseRecord(
        user_id=user_id,
        product_id=product_id,
        amount=2000,
        receipt=Receipt(charge_id="ch_1", amount_minor_units=2000),
    )


class TestMemoryProductStore:
    async def test_duplicate_slug_rejected(self, product_store, product):
        with pytest.raises(CatalogEditError):
            await product_store.add(product.model_copy(update={"id": "other"}))

    async def test_update_to_taken_slug_rejected(self, product_store, product):
        await product_store.add(product.model_copy(update={"id": "p2", "slug": "other"}))
        with pytest.raises(CatalogEditError):
            await product_store.update("p2", slug="builder-book")

    async def test_update_last_commit_missing(self):
        with pytest.raises(ProductNotFound):
            await MemoryProductStore().update_last_commit("x", "sha")

    async def test_update_ignores_none_fields(self, product_store):
        updated = await product_store.update("prod-1", price=Decimal("25"))
        assert updated.price == Decimal("25")
        assert updated.name == "Builder Book"


class TestMemoryContentUnitStore:
    async def test_one_unit_per_product_path(self):
        store = MemoryContentUnitStore()
        await store.upsert(ContentUnit(product_id="p", path="a.md", title="A", order=1, slug="a"))
        await store.upsert(ContentUnit(product_id="p", path="a.md", title="B", order=1, slug="a"))

        units = await store.list_for_product("p")
        assert len(units) == 1
        assert units[0].title == "B"
        assert store.write_count == 2


class TestMemoryPurchaseLedger:
    async def test_find_after_create(self):
        ledger = MemoryPurchaseLedger()
        record = await ledger.create(_record())
        assert await ledger.find_one("u1", "p1") == record
        assert await ledger.find_one("u1", "p2") is None

    async def test_create_enforces_uniqueness(self):
        ledger = MemoryPurchaseLedger()
        await ledger.create(_record())
        with pytest.raises(AlreadyPurchased):
            await ledger.create(_record())
        assert len(ledger.all()) == 1

    async def test_records_are_immutable(self):
        record = _record()
        with pytest.raises(ValidationError):
            record.amount = 1


class TestMemoryOwnershipStore:
    async def test_add_is_idempotent(self):
        store = MemoryOwnershipStore()
        await store.add_owned_product("u1", "p1")
        await store.add_owned_product("u1", "p1")
        assert store.owned_by("u1") == {"p1"}
        assert store.owned_by("u2") == set()
