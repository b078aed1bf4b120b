"""Initial schema: products, content_units, purchases, user_products.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19 00:00:00.000000
"""
from __future__ import annotations

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import JSONB

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Products table
    op.create_table(
        "products",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("slug", sa.String(256), nullable=False, unique=True),
        sa.Column("github_repo", sa.String(256), nullable=False),
        sa.Column("github_last_commit_sha", sa.String(64), nullable=True),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("is_in_preorder", sa.Boolean, server_default=sa.false()),
        sa.Column("preorder_price", sa.Numeric(12, 2), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_products_created_at", "products", ["created_at"])

    # Content units (chapters)
    op.create_table(
        "content_units",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "product_id", sa.String(36),
            sa.ForeignKey("products.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("path", sa.String(256), nullable=False),
        sa.Column("title", sa.String(512), nullable=False),
        sa.Column("order", sa.Integer, nullable=False),
        sa.Column("slug", sa.String(256), nullable=False),
        sa.Column("body", sa.Text, nullable=False, server_default=""),
        sa.Column("metadata_json", JSONB, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("product_id", "path", name="uq_content_units_product_path"),
    )
    op.create_index(
        "ix_content_units_product_order", "content_units", ["product_id", "order"],
    )

    # Purchases
    op.create_table(
        "purchases",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("product_id", sa.String(36), sa.ForeignKey("products.id"), nullable=False),
        sa.Column("amount", sa.Integer, nullable=False),
        sa.Column("receipt_json", JSONB, nullable=False),
        sa.Column("is_preorder", sa.Boolean, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "product_id", name="uq_purchases_user_product"),
    )

    # Owned products
    op.create_table(
        "user_products",
        sa.Column("user_id", sa.String(64), primary_key=True),
        sa.Column(
            "product_id", sa.String(36),
            sa.ForeignKey("products.id"), primary_key=True,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("user_products")
    op.drop_table("purchases")
    op.drop_index("ix_content_units_product_order", table_name="content_units")
    op.drop_table("content_units")
    op.drop_index("ix_products_created_at", table_name="products")
    op.drop_table("products")
