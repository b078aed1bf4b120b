"""Shared fixtures for the digital-catalog test suite."""

from __future__ import annotations

import base64
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from digital_catalog.catalog.chapter_sync import StoreChapterSync
from digital_catalog.catalog.memory_store import MemoryContentUnitStore, MemoryProductStore
from digital_catalog.commerce.background import BackgroundTasks
from digital_catalog.commerce.ledger import MemoryOwnershipStore, MemoryPurchaseLedger
from digital_catalog.core.clock import FixedClock
from digital_catalog.core.config import EmailConfig, Settings, StorefrontConfig
from digital_catalog.core.enums import EntryType
from digital_catalog.core.models import (
    ChargeRequest,
    Commit,
    EmailMessage,
    Product,
    Receipt,
    RepoEntry,
    Subscription,
    User,
)
from digital_catalog.notifications.dispatcher import NotificationDispatcher


# ---------------------------------------------------------------------------
# Collaborator doubles
# ---------------------------------------------------------------------------

def encode(text: str) -> bytes:
    """Base64 transport encoding, as the repository host returns it."""
    return base64.b64encode(text.encode("utf-8"))


class FakeVcsClient:
    """Repository with a fixed commit and a flat listing of files/dirs."""

    def __init__(
        self,
        files: dict[str, str] | None = None,
        dirs: list[str] | None = None,
        commit_sha: str | None = "sha-1",
    ) -> None:
        self.files = dict(files or {})
        self.dirs = list(dirs or [])
        self.commit_sha = commit_sha
        self.fail_paths: set[str] = set()
        self.fetched: list[str] = []
        self.listed = 0

    async def latest_commit(self, repo: str) -> Commit | None:
        if self.commit_sha is None:
            return None
        return Commit(sha=self.commit_sha)

    async def list_top_level(self, repo: str) -> list[RepoEntry]:
        self.listed += 1
        entries = [RepoEntry(path=p, type=EntryType.FILE) for p in self.files]
        entries += [RepoEntry(path=d, type=EntryType.DIR) for d in self.dirs]
        return entries

    async def fetch_file(self, repo: str, path: str) -> bytes:
        self.fetched.append(path)
        if path in self.fail_paths:
            raise RuntimeError(f"fetch failed for {path}")
        return encode(self.files[path])


class FakePaymentGateway:
    """Captures every charge; raises ``error`` if set."""

    def __init__(self) -> None:
        self.charges: list[ChargeRequest] = []
        self.error: Exception | None = None

    async def charge(self, request: ChargeRequest) -> Receipt:
        self.charges.append(request)
        if self.error is not None:
            raise self.error
        return Receipt(
            charge_id=f"ch_{len(self.charges)}",
            amount_minor_units=request.amount_minor_units,
            raw={"status": "succeeded"},
        )


class FakeEmailTransport:
    def __init__(self) -> None:
        self.sent: list[EmailMessage] = []
        self.error: Exception | None = None

    async def send(self, message: EmailMessage) -> None:
        if self.error is not None:
            raise self.error
        self.sent.append(message)


class FakeMailingList:
    def __init__(self) -> None:
        self.subscriptions: list[Subscription] = []
        self.error: Exception | None = None

    async def subscribe(self, subscription: Subscription) -> None:
        if self.error is not None:
            raise self.error
        self.subscriptions.append(subscription)


BOOK_FILES = {
    "introduction.md": "---\ntitle: Introduction\n---\nWelcome.\n",
    "chapter-1.md": "---\ntitle: Setup\norder: 2\n---\n# Setup\n",
    "chapter-12.md": "# Deploy\n",
    "notes.txt": "scratch",
}


# ---------------------------------------------------------------------------
# Clock & config
# ---------------------------------------------------------------------------

@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def settings() -> Settings:
    return Settings(
        storefront=StorefrontConfig(root_url="https://builderbook.org"),
        email=EmailConfig(sender_address="team@builderbook.org"),
    )


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

@pytest.fixture
def product(clock) -> Product:
    return Product(
        id="prod-1",
        name="Builder Book",
        slug="builder-book",
        github_repo="acme/builder-book",
        price=Decimal("20"),
        created_at=clock.now(),
    )


@pytest.fixture
def product_store(product) -> MemoryProductStore:
    return MemoryProductStore([product])


@pytest.fixture
def unit_store() -> MemoryContentUnitStore:
    return MemoryContentUnitStore()


@pytest.fixture
def chapter_sync(unit_store, clock) -> StoreChapterSync:
    return StoreChapterSync(unit_store, clock=clock)


@pytest.fixture
def vcs() -> FakeVcsClient:
    return FakeVcsClient(files=BOOK_FILES, dirs=["img"])


@pytest.fixture
def vcs_factory(vcs):
    """Factory returning ``vcs``; records the credentials it was given."""
    credentials: list[str] = []

    def _factory(credential: str) -> FakeVcsClient:
        credentials.append(credential)
        return vcs

    _factory.credentials = credentials  # type: ignore[attr-defined]
    return _factory


# ---------------------------------------------------------------------------
# Commerce
# ---------------------------------------------------------------------------

@pytest.fixture
def user() -> User:
    return User(id="user-1", email="reader@example.com", display_name="Ada")


@pytest.fixture
def payment_gateway() -> FakePaymentGateway:
    return FakePaymentGateway()


@pytest.fixture
def ledger() -> MemoryPurchaseLedger:
    return MemoryPurchaseLedger()


@pytest.fixture
def ownership() -> MemoryOwnershipStore:
    return MemoryOwnershipStore()


@pytest.fixture
def background() -> BackgroundTasks:
    return BackgroundTasks()


@pytest.fixture
def email_transport() -> FakeEmailTransport:
    return FakeEmailTransport()


@pytest.fixture
def mailing_list() -> FakeMailingList:
    return FakeMailingList()


@pytest.fixture
def dispatcher(email_transport, mailing_list) -> NotificationDispatcher:
    return NotificationDispatcher(email_transport, mailing_list)
