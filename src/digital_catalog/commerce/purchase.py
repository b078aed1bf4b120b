"""One-time purchase workflow.

Strictly sequential: load product, price it, require a user, check the
ledger, capture payment, persist the record.  Only after the record is
persisted are the best-effort side effects (ownership update, confirmation
email, mailing-list subscription) handed to :class:`BackgroundTasks`; the
caller never waits on them and their failures never surface.

Idempotency
-----------
At most one record exists per (user, product):

1. Attempts for the same pair are serialized by an in-process keyed lock,
   so a concurrent duplicate sees the first record during its ledger check
   and is rejected before any charge.
2. The ledger itself enforces uniqueness on ``create``.  A conflict there
   means another process won the race after this one captured payment; the
   receipt is logged for manual refund and ``AlreadyPurchased`` is raised.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

from digital_catalog.core.clock import IClock, WallClock
from digital_catalog.core.config import EmailConfig, StorefrontConfig
from digital_catalog.core.enums import EmailTemplateName, MailingList, PurchaseStatus
from digital_catalog.core.errors import (
    AlreadyPurchased,
    InvalidTransition,
    PaymentFailed,
    ProductNotFound,
    Unauthenticated,
)
from digital_catalog.core.ids import purchase_key
from digital_catalog.core.interfaces import (
    IOwnershipStore,
    IPaymentGateway,
    IProductStore,
    IPurchaseLedger,
)
from digital_catalog.core.models import (
    ChargeRequest,
    EmailMessage,
    Product,
    PurchaseRecord,
    Subscription,
    User,
)
from digital_catalog.notifications.dispatcher import NotificationDispatcher
from digital_catalog.notifications.templates import TemplateRenderer
from digital_catalog.observability.logger import request_context

from .background import BackgroundTasks
from .locks import KeyedLock
from .pricing import effective_price

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Attempt state machine
# ---------------------------------------------------------------------------

_VALID_TRANSITIONS: dict[PurchaseStatus, frozenset[PurchaseStatus]] = {
    PurchaseStatus.REQUESTED: frozenset(
        {PurchaseStatus.CHARGING, PurchaseStatus.REJECTED}
    ),
    PurchaseStatus.CHARGING: frozenset(
        {PurchaseStatus.RECORDED, PurchaseStatus.REJECTED}
    ),
    # Terminal states -- no further transitions allowed.
    PurchaseStatus.RECORDED: frozenset(),
    PurchaseStatus.REJECTED: frozenset(),
}


@dataclass
class PurchaseAttempt:
    """Lifecycle of a single purchase attempt for one (user, product)."""

    user_id: str
    product_id: str
    status: PurchaseStatus = PurchaseStatus.REQUESTED
    reason: str = ""
    history: list[PurchaseStatus] = field(
        default_factory=lambda: [PurchaseStatus.REQUESTED]
    )

    @property
    def is_terminal(self) -> bool:
        return not _VALID_TRANSITIONS[self.status]

    def transition(self, new_status: PurchaseStatus, reason: str = "") -> None:
        if new_status not in _VALID_TRANSITIONS[self.status]:
            raise InvalidTransition(
                f"Purchase attempt {self.user_id}/{self.product_id}: "
                f"{self.status.value} -> {new_status.value}"
            )
        self.status = new_status
        self.reason = reason
        self.history.append(new_status)


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------

class PurchaseOrchestrator:
    """End-to-end purchase of a product by an authenticated user."""

    def __init__(
        self,
        products: IProductStore,
        ledger: IPurchaseLedger,
        gateway: IPaymentGateway,
        ownership: IOwnershipStore,
        dispatcher: NotificationDispatcher,
        *,
        storefront: StorefrontConfig,
        email: EmailConfig,
        renderer: TemplateRenderer | None = None,
        background: BackgroundTasks | None = None,
        clock: IClock | None = None,
    ) -> None:
        self._products = products
        self._ledger = ledger
        self._gateway = gateway
        self._ownership = ownership
        self._dispatcher = dispatcher
        self._storefront = storefront
        self._email = email
        self._renderer = renderer or TemplateRenderer()
        self._background = background or BackgroundTasks()
        self._clock = clock or WallClock()
        self._locks = KeyedLock()

    @property
    def background(self) -> BackgroundTasks:
        return self._background

    async def purchase(
        self,
        product_id: str,
        user: User | None,
        payment_token: str,
    ) -> PurchaseRecord:
        """Charge *user* for *product_id* and record the purchase.

        Raises:
            ProductNotFound: The product does not exist.
            Unauthenticated: *user* is ``None``.
            AlreadyPurchased: The user already owns the product.
            PaymentFailed: The gateway did not capture the charge.
        """
        with request_context("purchase", product_id=product_id):
            product = await self._products.get(product_id)
            if product is None:
                raise ProductNotFound(product_id)

            price = effective_price(product)

            if user is None:
                raise Unauthenticated("User required")

            attempt = PurchaseAttempt(user_id=user.id, product_id=product.id)
            async with self._locks.hold(purchase_key(user.id, product.id)):
                record = await self._charge_and_record(
                    attempt, product, user, payment_token,
                    amount=price.minor_units,
                    is_preorder=price.is_preorder,
                    now=self._clock.now(),
                )

            self._dispatch_side_effects(product, user, is_preorder=price.is_preorder)
            return record

    async def _charge_and_record(
        self,
        attempt: PurchaseAttempt,
        product: Product,
        user: User,
        payment_token: str,
        *,
        amount: int,
        is_preorder: bool,
        now: datetime,
    ) -> PurchaseRecord:
        if await self._ledger.find_one(user.id, product.id) is not None:
            attempt.transition(PurchaseStatus.REJECTED, "already_purchased")
            raise AlreadyPurchased(user.id, product.id)

        attempt.transition(PurchaseStatus.CHARGING)
        try:
            receipt = await self._gateway.charge(
                ChargeRequest(
                    amount_minor_units=amount,
                    token=payment_token,
                    description=f"Payment for {product.name}",
                    metadata={"product_name": product.name, "buyer_email": user.email},
                )
            )
        except Exception as exc:
            attempt.transition(PurchaseStatus.REJECTED, "payment_failed")
            logger.warning(
                "Payment failed user=%s product=%s amount=%d error=%s",
                user.id, product.id, amount, exc,
            )
            if isinstance(exc, PaymentFailed):
                raise
            raise PaymentFailed(str(exc)) from exc

        try:
            record = await self._ledger.create(
                PurchaseRecord(
                    user_id=user.id,
                    product_id=product.id,
                    amount=amount,
                    receipt=receipt,
                    is_preorder=is_preorder,
                    created_at=now,
                )
            )
        except AlreadyPurchased:
            attempt.transition(PurchaseStatus.REJECTED, "ledger_conflict")
            logger.error(
                "Charge captured without purchase record user=%s product=%s "
                "charge_id=%s amount=%d: refund required",
                user.id, product.id, receipt.charge_id, amount,
            )
            raise

        attempt.transition(PurchaseStatus.RECORDED)
        logger.info(
            "Purchase recorded id=%s user=%s product=%s amount=%d preorder=%s",
            record.id, user.id, product.id, amount, is_preorder,
        )
        return record

    # ------------------------------------------------------------------
    # Best-effort side effects
    # ------------------------------------------------------------------

    def _dispatch_side_effects(self, product: Product, user: User, *, is_preorder: bool) -> None:
        self._background.spawn(
            self._ownership.add_owned_product(user.id, product.id),
            name=f"own-product-{user.id}-{product.id}",
        )
        self._background.spawn(
            self._send_confirmation(product, user, is_preorder=is_preorder),
            name=f"confirm-email-{user.id}-{product.id}",
        )
        self._background.spawn(
            self._dispatcher.subscribe(
                Subscription(
                    email=user.email,
                    list_name=(
                        MailingList.PREORDERED if is_preorder else MailingList.ORDERED
                    ).value,
                    metadata={"book": product.slug},
                )
            ),
            name=f"subscribe-{user.id}-{product.id}",
        )

    async def _send_confirmation(self, product: Product, user: User, *, is_preorder: bool) -> bool:
        template = self._renderer.render(
            (EmailTemplateName.PREORDER if is_preorder else EmailTemplateName.PURCHASE).value,
            user_name=user.display_name,
            book_title=product.name,
            book_url=self._storefront.book_url(product.slug),
        )
        return await self._dispatcher.email(
            EmailMessage(
                from_address=self._email.from_header,
                to=[user.email],
                subject=template.subject,
                body=template.body,
            )
        )
