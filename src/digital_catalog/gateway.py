"""Catalog gateway: the library-level entry point for the outer service.

:class:`CatalogGateway` wires the content sync and purchase orchestrators
from settings plus the external collaborators, and exposes the two
operations the service layer calls:

- ``sync_content(product_id, credential) -> SyncResult``
- ``purchase(product_id, user, payment_token) -> PurchaseRecord``

Usage::

    gateway = CatalogGateway.from_config(
        settings,
        products=product_store,
        content_units=unit_store,
        vcs_factory=make_github_client,
        payment_gateway=stripe_adapter,
        ledger=ledger,
        ownership=ownership_store,
        email_transport=ses_adapter,
        mailing_list=mailchimp_adapter,
    )
    await gateway.start()
    record = await gateway.purchase(product_id, user, token)
    await gateway.stop()  # drains in-flight notifications
"""

from __future__ import annotations

import logging

from digital_catalog.catalog.chapter_sync import StoreChapterSync
from digital_catalog.catalog.content_sync import ContentSyncOrchestrator
from digital_catalog.catalog.products import ProductCatalog
from digital_catalog.commerce.background import BackgroundTasks
from digital_catalog.commerce.purchase import PurchaseOrchestrator
from digital_catalog.core.clock import IClock, WallClock
from digital_catalog.core.config import Settings
from digital_catalog.core.interfaces import (
    IChapterSync,
    IContentUnitStore,
    IEmailTransport,
    IMailingListClient,
    IOwnershipStore,
    IPaymentGateway,
    IProductStore,
    IPurchaseLedger,
    VersionControlClientFactory,
)
from digital_catalog.core.models import PurchaseRecord, SyncResult, User
from digital_catalog.notifications.dispatcher import NotificationDispatcher
from digital_catalog.notifications.templates import TemplateRenderer

logger = logging.getLogger(__name__)


class CatalogGateway:
    """High-level facade over the catalog and commerce workflows."""

    def __init__(
        self,
        content_sync: ContentSyncOrchestrator,
        purchases: PurchaseOrchestrator,
        catalog: ProductCatalog,
        background: BackgroundTasks,
    ) -> None:
        self._content_sync = content_sync
        self._purchases = purchases
        self._catalog = catalog
        self._background = background

    # ------------------------------------------------------------------
    # Factory
    # ------------------------------------------------------------------

    @classmethod
    def from_config(
        cls,
        settings: Settings,
        *,
        products: IProductStore,
        content_units: IContentUnitStore,
        vcs_factory: VersionControlClientFactory,
        payment_gateway: IPaymentGateway,
        ledger: IPurchaseLedger,
        ownership: IOwnershipStore,
        email_transport: IEmailTransport,
        mailing_list: IMailingListClient,
        chapter_sync: IChapterSync | None = None,
        renderer: TemplateRenderer | None = None,
        clock: IClock | None = None,
    ) -> CatalogGateway:
        """Construct a fully-wired gateway.

        Args:
            settings: Validated settings; must carry an email sender address.
            products: Product store shared by both workflows.
            content_units: Chapter store, used by the default chapter sync.
            vcs_factory: Builds a version-control client per credential.
            payment_gateway: Captures charges.
            ledger: Purchase ledger enforcing (user, product) uniqueness.
            ownership: Owned-products set updated after a purchase.
            email_transport: Sends confirmation emails.
            mailing_list: Receives subscription updates.
            chapter_sync: Override for the store-backed chapter upsert.
            renderer: Override for the default email templates.
            clock: Time source for records (defaults to wall clock).

        Raises:
            ConfigError: Settings lack an email sender address.
        """
        settings.validate_email()
        clock = clock or WallClock()
        background = BackgroundTasks()

        content_sync = ContentSyncOrchestrator(
            products=products,
            chapter_sync=chapter_sync or StoreChapterSync(content_units, clock=clock),
            client_factory=vcs_factory,
        )
        purchases = PurchaseOrchestrator(
            products=products,
            ledger=ledger,
            gateway=payment_gateway,
            ownership=ownership,
            dispatcher=NotificationDispatcher(email_transport, mailing_list),
            storefront=settings.storefront,
            email=settings.email,
            renderer=renderer,
            background=background,
            clock=clock,
        )
        catalog = ProductCatalog(products, content_units, clock=clock)
        return cls(content_sync, purchases, catalog, background)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Lifecycle hook paired with :meth:`stop`.

        The gateway holds no connections or workers of its own, so nothing
        is acquired here and operations work without it.  Hosts call it
        for a symmetric start/stop around the gateway.
        """
        logger.info("CatalogGateway started")

    async def stop(self) -> None:
        """Wait for in-flight side effects, then stop."""
        pending = self._background.pending
        await self._background.drain()
        logger.info("CatalogGateway stopped (drained %d background tasks)", pending)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def sync_content(self, product_id: str, credential: str) -> SyncResult:
        return await self._content_sync.sync(product_id, credential)

    async def purchase(
        self,
        product_id: str,
        user: User | None,
        payment_token: str,
    ) -> PurchaseRecord:
        return await self._purchases.purchase(product_id, user, payment_token)

    # ------------------------------------------------------------------
    # Component accessors
    # ------------------------------------------------------------------

    @property
    def catalog(self) -> ProductCatalog:
        return self._catalog

    @property
    def background(self) -> BackgroundTasks:
        return self._background
