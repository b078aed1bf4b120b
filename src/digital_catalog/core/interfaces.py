"""Protocol interfaces for the catalog platform.

All module boundaries are defined here as Protocol classes.
External collaborators (version control, payments, email, mailing list)
and stores are swapped (memory/postgres/test doubles) without changing
the orchestrators that call them.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Callable, Protocol, runtime_checkable

from .models import (
    ChargeRequest,
    Commit,
    ContentUnit,
    EmailMessage,
    ParsedChapter,
    Product,
    PurchaseRecord,
    Receipt,
    RepoEntry,
    Subscription,
)


# ---------------------------------------------------------------------------
# Version control
# ---------------------------------------------------------------------------

@runtime_checkable
class IVersionControlClient(Protocol):
    """Read access to a hosted repository, bound to one credential."""

    async def latest_commit(self, repo: str) -> Commit | None: ...

    async def list_top_level(self, repo: str) -> list[RepoEntry]: ...

    async def fetch_file(self, repo: str, path: str) -> bytes:
        """Return the file content in its transport encoding (base64)."""
        ...


VersionControlClientFactory = Callable[[str], IVersionControlClient]
"""Builds a client for a single access credential."""


@runtime_checkable
class IChapterSync(Protocol):
    """Upserts one content unit from a parsed repository file."""

    async def apply(self, product: Product, parsed: ParsedChapter) -> ContentUnit: ...


# ---------------------------------------------------------------------------
# Catalog stores
# ---------------------------------------------------------------------------

@runtime_checkable
class IProductStore(Protocol):

    async def get(self, product_id: str) -> Product | None: ...

    async def get_by_slug(self, slug: str) -> Product | None: ...

    async def slug_exists(self, slug: str) -> bool: ...

    async def list(self, *, offset: int = 0, limit: int = 10) -> list[Product]: ...

    async def add(self, product: Product) -> Product: ...

    async def update(
        self,
        product_id: str,
        *,
        name: str | None = None,
        slug: str | None = None,
        price: Decimal | None = None,
        github_repo: str | None = None,
    ) -> Product: ...

    async def update_last_commit(self, product_id: str, sha: str) -> None: ...


@runtime_checkable
class IContentUnitStore(Protocol):

    async def get(self, product_id: str, path: str) -> ContentUnit | None: ...

    async def upsert(self, unit: ContentUnit) -> ContentUnit:
        """Insert or replace the unit keyed by (product_id, path)."""
        ...

    async def list_for_product(self, product_id: str) -> list[ContentUnit]:
        """Units of a product sorted by ``order``."""
        ...


# ---------------------------------------------------------------------------
# Commerce
# ---------------------------------------------------------------------------

@runtime_checkable
class IPaymentGateway(Protocol):
    """Captures a charge. Raises on rejection or transport failure."""

    async def charge(self, request: ChargeRequest) -> Receipt: ...


@runtime_checkable
class IPurchaseLedger(Protocol):
    """Durable store of completed purchases.

    ``create`` must enforce (user_id, product_id) uniqueness and raise
    :class:`~digital_catalog.core.errors.AlreadyPurchased` on conflict.
    """

    async def find_one(self, user_id: str, product_id: str) -> PurchaseRecord | None: ...

    async def create(self, record: PurchaseRecord) -> PurchaseRecord: ...


@runtime_checkable
class IOwnershipStore(Protocol):
    """Set of products each user owns."""

    async def add_owned_product(self, user_id: str, product_id: str) -> None: ...


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------

@runtime_checkable
class IEmailTransport(Protocol):

    async def send(self, message: EmailMessage) -> None: ...


@runtime_checkable
class IMailingListClient(Protocol):

    async def subscribe(self, subscription: Subscription) -> None: ...
