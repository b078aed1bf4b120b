"""In-memory purchase ledger and ownership store.

The ledger enforces one record per (user, product) on ``create``, the same
guarantee the database gives through its unique constraint.
"""

from __future__ import annotations

from digital_catalog.core.errors import AlreadyPurchased
from digital_catalog.core.ids import purchase_key
from digital_catalog.core.models import PurchaseRecord


class MemoryPurchaseLedger:

    def __init__(self) -> None:
        self._records: dict[str, PurchaseRecord] = {}

    async def find_one(self, user_id: str, product_id: str) -> PurchaseRecord | None:
        return self._records.get(purchase_key(user_id, product_id))

    async def create(self, record: PurchaseRecord) -> PurchaseRecord:
        key = purchase_key(record.user_id, record.product_id)
        if key in self._records:
            raise AlreadyPurchased(record.user_id, record.product_id)
        self._records[key] = record
        return record

    def all(self) -> list[PurchaseRecord]:
        return list(self._records.values())


class MemoryOwnershipStore:
    """user_id -> set of owned product ids."""

    def __init__(self) -> None:
        self._owned: dict[str, set[str]] = {}

    async def add_owned_product(self, user_id: str, product_id: str) -> None:
        self._owned.setdefault(user_id, set()).add(product_id)

    def owned_by(self, user_id: str) -> set[str]:
        return set(self._owned.get(user_id, set()))
