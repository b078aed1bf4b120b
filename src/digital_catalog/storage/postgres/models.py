"""SQLAlchemy ORM models for the catalog and commerce database.

Primary keys are the string UUIDs generated by
:func:`digital_catalog.core.ids.new_id`.  Timestamps are UTC.

Uniqueness carried by the schema:
    products.slug
    content_units (product_id, path)
    purchases (user_id, product_id)
    user_products (user_id, product_id)
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Declarative base
# ---------------------------------------------------------------------------

class Base(DeclarativeBase):
    """Shared declarative base for all ORM models."""

    pass


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

class ProductRow(Base):
    """Persisted :class:`digital_catalog.core.models.Product`."""

    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    slug: Mapped[str] = mapped_column(String(256), unique=True, nullable=False)
    github_repo: Mapped[str] = mapped_column(String(256), nullable=False)
    github_last_commit_sha: Mapped[str | None] = mapped_column(String(64), nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    is_in_preorder: Mapped[bool] = mapped_column(Boolean, default=False)
    preorder_price: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now(),
    )

    __table_args__ = (
        Index("ix_products_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<ProductRow(id={self.id!r}, slug={self.slug!r})>"


class ContentUnitRow(Base):
    """One chapter of a product."""

    __tablename__ = "content_units"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    product_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("products.id", ondelete="CASCADE"), nullable=False,
    )
    path: Mapped[str] = mapped_column(String(256), nullable=False)
    title: Mapped[str] = mapped_column(String(512), nullable=False)
    order: Mapped[int] = mapped_column(Integer, nullable=False)
    slug: Mapped[str] = mapped_column(String(256), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False, default="")
    metadata_json: Mapped[dict | None] = mapped_column(JSONB, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, server_default=func.now(),
    )

    __table_args__ = (
        UniqueConstraint("product_id", "path", name="uq_content_units_product_path"),
        Index("ix_content_units_product_order", "product_id", "order"),
    )

    def __repr__(self) -> str:
        return f"<ContentUnitRow(product_id={self.product_id!r}, path={self.path!r})>"


# ---------------------------------------------------------------------------
# Commerce
# ---------------------------------------------------------------------------

class PurchaseRow(Base):
    """Completed purchase.  Rows are inserted once and never updated."""

    __tablename__ = "purchases"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    product_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("products.id"), nullable=False,
    )
    amount: Mapped[int] = mapped_column(Integer, nullable=False)  # Minor units
    receipt_json: Mapped[dict] = mapped_column(JSONB, nullable=False)
    is_preorder: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now(),
    )

    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name="uq_purchases_user_product"),
    )

    def __repr__(self) -> str:
        return (
            f"<PurchaseRow(user_id={self.user_id!r}, product_id={self.product_id!r}, "
            f"amount={self.amount})>"
        )


class UserProductRow(Base):
    """Membership of a product in a user's owned set."""

    __tablename__ = "user_products"

    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    product_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("products.id"), primary_key=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now(),
    )
