"""PostgreSQL-backed stores implementing the core store protocols.

Each repository receives an :class:`async_sessionmaker` and opens one
transaction per call.  Conversion helpers translate between core domain
models (:mod:`digital_catalog.core.models`) and ORM rows.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Sequence

from sqlalchemy import func, select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from digital_catalog.core.errors import AlreadyPurchased, ProductNotFound
from digital_catalog.core.models import ContentUnit, Product, PurchaseRecord, Receipt

from .models import ContentUnitRow, ProductRow, PurchaseRow, UserProductRow

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Conversion helpers
# ---------------------------------------------------------------------------

def _product_to_row(product: Product) -> ProductRow:
    return ProductRow(
        id=product.id,
        name=product.name,
        slug=product.slug,
        github_repo=product.github_repo,
        github_last_commit_sha=product.github_last_commit_sha,
        price=product.price,
        is_in_preorder=product.is_in_preorder,
        preorder_price=product.preorder_price,
        created_at=product.created_at,
    )


def _row_to_product(row: ProductRow) -> Product:
    return Product(
        id=row.id,
        name=row.name,
        slug=row.slug,
        github_repo=row.github_repo,
        github_last_commit_sha=row.github_last_commit_sha,
        price=row.price,
        is_in_preorder=bool(row.is_in_preorder),
        preorder_price=row.preorder_price,
        created_at=row.created_at,
    )


def _unit_values(unit: ContentUnit) -> dict:
    """Column values for an INSERT ... ON CONFLICT of *unit*."""
    dumped = unit.model_dump(mode="json", include={"metadata"})
    return {
        "id": unit.id,
        "product_id": unit.product_id,
        "path": unit.path,
        "title": unit.title,
        "order": unit.order,
        "slug": unit.slug,
        "body": unit.body,
        "metadata_json": dumped["metadata"] or None,
        "created_at": unit.created_at,
        "updated_at": unit.updated_at,
    }


def _row_to_unit(row: ContentUnitRow) -> ContentUnit:
    return ContentUnit(
        id=row.id,
        product_id=row.product_id,
        path=row.path,
        title=row.title,
        order=row.order,
        slug=row.slug,
        body=row.body,
        metadata=row.metadata_json or {},
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _record_to_row(record: PurchaseRecord) -> PurchaseRow:
    return PurchaseRow(
        id=record.id,
        user_id=record.user_id,
        product_id=record.product_id,
        amount=record.amount,
        receipt_json=record.receipt.model_dump(mode="json"),
        is_preorder=record.is_preorder,
        created_at=record.created_at,
    )


def _row_to_record(row: PurchaseRow) -> PurchaseRecord:
    return PurchaseRecord(
        id=row.id,
        user_id=row.user_id,
        product_id=row.product_id,
        amount=row.amount,
        receipt=Receipt.model_validate(row.receipt_json),
        is_preorder=bool(row.is_preorder),
        created_at=row.created_at,
    )


# ---------------------------------------------------------------------------
# Statements and constraint handling
# ---------------------------------------------------------------------------

PURCHASE_UNIQUE_CONSTRAINT = "uq_purchases_user_product"
CONTENT_UNIT_UNIQUE_CONSTRAINT = "uq_content_units_product_path"

_UNIT_UPDATE_COLUMNS = ("title", "order", "slug", "body", "metadata_json", "updated_at")


def _upsert_unit_stmt(unit: ContentUnit):
    """INSERT ... ON CONFLICT (product_id, path) DO UPDATE ... RETURNING."""
    stmt = insert(ContentUnitRow).values(**_unit_values(unit))
    return stmt.on_conflict_do_update(
        constraint=CONTENT_UNIT_UNIQUE_CONSTRAINT,
        set_={k: stmt.excluded[k] for k in _UNIT_UPDATE_COLUMNS},
    ).returning(ContentUnitRow)


def _add_owned_stmt(user_id: str, product_id: str):
    return (
        insert(UserProductRow)
        .values(user_id=user_id, product_id=product_id)
        .on_conflict_do_nothing()
    )


def _violated_constraint(exc: IntegrityError) -> str | None:
    """Constraint name from the driver error, when it reports one.

    asyncpg errors carry ``constraint_name``; SQLAlchemy's adapted error
    keeps the asyncpg error as ``__cause__``.
    """
    for err in (exc.orig, getattr(exc.orig, "__cause__", None)):
        name = getattr(err, "constraint_name", None)
        if isinstance(name, str) and name:
            return name
    return None


def _is_duplicate_purchase(exc: IntegrityError) -> bool:
    name = _violated_constraint(exc)
    if name is not None:
        return name == PURCHASE_UNIQUE_CONSTRAINT
    return PURCHASE_UNIQUE_CONSTRAINT in str(exc.orig)


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------

class SqlProductStore:
    """Repository for :class:`ProductRow`."""

    def __init__(self, sessions: async_sessionmaker[AsyncSession]) -> None:
        self._sessions = sessions

    async def get(self, product_id: str) -> Product | None:
        async with self._sessions() as session:
            row = await session.get(ProductRow, product_id)
            return _row_to_product(row) if row is not None else None

    async def get_by_slug(self, slug: str) -> Product | None:
        async with self._sessions() as session:
            result = await session.execute(select(ProductRow).where(ProductRow.slug == slug))
            row = result.scalar_one_or_none()
            return _row_to_product(row) if row is not None else None

    async def slug_exists(self, slug: str) -> bool:
        async with self._sessions() as session:
            result = await session.execute(
                select(func.count()).select_from(ProductRow).where(ProductRow.slug == slug)
            )
            return result.scalar_one() > 0

    async def list(self, *, offset: int = 0, limit: int = 10) -> list[Product]:
        stmt = (
            select(ProductRow)
            .order_by(ProductRow.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        async with self._sessions() as session:
            result = await session.execute(stmt)
            rows: Sequence[ProductRow] = result.scalars().all()
            return [_row_to_product(r) for r in rows]

    async def add(self, product: Product) -> Product:
        async with self._sessions() as session, session.begin():
            session.add(_product_to_row(product))
        logger.debug("Inserted product %s", product.id)
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
        async with self._sessions() as session, session.begin():
            row = await session.get(ProductRow, product_id)
            if row is None:
                raise ProductNotFound(product_id)
            if name is not None:
                row.name = name
            if slug is not None:
                row.slug = slug
            if price is not None:
                row.price = price
            if github_repo is not None:
                row.github_repo = github_repo
            await session.flush()
            return _row_to_product(row)

    async def update_last_commit(self, product_id: str, sha: str) -> None:
        async with self._sessions() as session, session.begin():
            result = await session.execute(
                update(ProductRow)
                .where(ProductRow.id == product_id)
                .values(github_last_commit_sha=sha)
            )
            if result.rowcount == 0:
                raise ProductNotFound(product_id)


# ---------------------------------------------------------------------------
# Content units
# ---------------------------------------------------------------------------

class SqlContentUnitStore:
    """Repository for :class:`ContentUnitRow`, upserting on (product_id, path)."""

    def __init__(self, sessions: async_sessionmaker[AsyncSession]) -> None:
        self._sessions = sessions

    async def get(self, product_id: str, path: str) -> ContentUnit | None:
        stmt = select(ContentUnitRow).where(
            ContentUnitRow.product_id == product_id,
            ContentUnitRow.path == path,
        )
        async with self._sessions() as session:
            row = (await session.execute(stmt)).scalar_one_or_none()
            return _row_to_unit(row) if row is not None else None

    async def upsert(self, unit: ContentUnit) -> ContentUnit:
        stmt = _upsert_unit_stmt(unit)
        async with self._sessions() as session, session.begin():
            row = (await session.execute(stmt)).scalar_one()
            return _row_to_unit(row)

    async def list_for_product(self, product_id: str) -> list[ContentUnit]:
        stmt = (
            select(ContentUnitRow)
            .where(ContentUnitRow.product_id == product_id)
            .order_by(ContentUnitRow.order.asc())
        )
        async with self._sessions() as session:
            rows = (await session.execute(stmt)).scalars().all()
            return [_row_to_unit(r) for r in rows]


# ---------------------------------------------------------------------------
# Purchases
# ---------------------------------------------------------------------------

class SqlPurchaseLedger:
    """Purchase ledger backed by ``purchases``.

    The ``uq_purchases_user_product`` constraint is the source of truth for
    one-purchase-per-pair; a violation of it on insert is raised as
    :class:`AlreadyPurchased`.  Other integrity errors propagate unchanged.
    """

    def __init__(self, sessions: async_sessionmaker[AsyncSession]) -> None:
        self._sessions = sessions

    async def find_one(self, user_id: str, product_id: str) -> PurchaseRecord | None:
        stmt = select(PurchaseRow).where(
            PurchaseRow.user_id == user_id,
            PurchaseRow.product_id == product_id,
        )
        async with self._sessions() as session:
            row = (await session.execute(stmt)).scalar_one_or_none()
            return _row_to_record(row) if row is not None else None

    async def create(self, record: PurchaseRecord) -> PurchaseRecord:
        try:
            async with self._sessions() as session, session.begin():
                session.add(_record_to_row(record))
        except IntegrityError as exc:
            if not _is_duplicate_purchase(exc):
                raise
            logger.warning(
                "Purchase insert conflict user=%s product=%s: %s",
                record.user_id, record.product_id, exc.orig,
            )
            raise AlreadyPurchased(record.user_id, record.product_id) from exc
        logger.debug("Inserted purchase %s", record.id)
        return record


class SqlOwnershipStore:
    """Owned-products set backed by ``user_products``."""

    def __init__(self, sessions: async_sessionmaker[AsyncSession]) -> None:
        self._sessions = sessions

    async def add_owned_product(self, user_id: str, product_id: str) -> None:
        async with self._sessions() as session, session.begin():
            await session.execute(_add_owned_stmt(user_id, product_id))
