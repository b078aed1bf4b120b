"""Core domain models used across the catalog platform.

These are the canonical "truth models" for the system.
Stores, orchestrators and collaborators all exchange these same types.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field

from .enums import EntryType
from .ids import new_id, utc_now


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

class Product(BaseModel):
    """A sellable digital product backed by a content repository."""

    id: str = Field(default_factory=new_id)
    name: str
    slug: str
    github_repo: str  # "owner/name"
    github_last_commit_sha: str | None = None
    price: Decimal  # Whole currency units
    is_in_preorder: bool = False
    preorder_price: Decimal | None = None
    created_at: datetime = Field(default_factory=utc_now)


class ContentUnit(BaseModel):
    """One chapter of a product, keyed by (product_id, path)."""

    id: str = Field(default_factory=new_id)
    product_id: str
    path: str  # "chapter-1.md"
    title: str
    order: int
    slug: str
    body: str = ""
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class ChapterSummary(BaseModel):
    title: str
    slug: str


class ProductDetail(BaseModel):
    """Product plus its table of contents, sorted by chapter order."""

    product: Product
    chapters: list[ChapterSummary] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Version control
# ---------------------------------------------------------------------------

class Commit(BaseModel):
    sha: str


class RepoEntry(BaseModel):
    """A top-level entry of a content repository."""

    path: str
    type: EntryType


class ParsedChapter(BaseModel):
    """A content file split into front matter and body, ready for upsert."""

    path: str
    title: str | None = None
    order: int | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    body: str = ""


class SyncResult(BaseModel):
    updated: bool
    commit_sha: str | None = None


# ---------------------------------------------------------------------------
# Commerce
# ---------------------------------------------------------------------------

class User(BaseModel):
    id: str
    email: str
    display_name: str = ""


class ChargeRequest(BaseModel):
    """What the payment gateway is asked to capture."""

    amount_minor_units: int
    token: str
    description: str = ""
    metadata: dict[str, str] = Field(default_factory=dict)


class Receipt(BaseModel):
    """Opaque proof of a captured charge as returned by the gateway."""

    charge_id: str
    amount_minor_units: int
    raw: dict[str, Any] = Field(default_factory=dict)


class PurchaseRecord(BaseModel):
    """Completed purchase. Immutable once created."""

    model_config = {"frozen": True}

    id: str = Field(default_factory=new_id)
    user_id: str
    product_id: str
    amount: int  # Minor units
    receipt: Receipt
    is_preorder: bool = False
    created_at: datetime = Field(default_factory=utc_now)


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------

class EmailMessage(BaseModel):
    from_address: str
    to: list[str]
    subject: str
    body: str


class Subscription(BaseModel):
    email: str
    list_name: str
    metadata: dict[str, str] = Field(default_factory=dict)


class RenderedTemplate(BaseModel):
    subject: str
    body: str
