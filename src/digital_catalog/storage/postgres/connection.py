"""Engine construction and the bundle of PostgreSQL-backed stores.

:class:`PostgresStores` owns one :class:`AsyncEngine` and hands the same
session factory to every repository, so a process needs exactly one
instance::

    stores = PostgresStores.from_url(settings.postgres_url)
    gateway = CatalogGateway.from_config(
        settings,
        products=stores.products,
        content_units=stores.content_units,
        ledger=stores.ledger,
        ownership=stores.ownership,
        ...
    )
    ...
    await stores.dispose()
"""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from .models import Base
from .repos import (
    SqlContentUnitStore,
    SqlOwnershipStore,
    SqlProductStore,
    SqlPurchaseLedger,
)

logger = logging.getLogger(__name__)


def create_engine(
    url: str,
    *,
    pool_size: int = 5,
    max_overflow: int = 10,
    echo: bool = False,
    use_null_pool: bool = False,
) -> AsyncEngine:
    """Build an engine for a ``postgresql+asyncpg://`` URL.

    ``use_null_pool`` opens a fresh connection per checkout, which suits
    migrations and one-off maintenance scripts.
    """
    if use_null_pool:
        engine = create_async_engine(url, echo=echo, poolclass=NullPool)
    else:
        engine = create_async_engine(
            url, echo=echo, pool_size=pool_size, max_overflow=max_overflow,
        )
    # Credentials stay out of the log.
    logger.info("Catalog database engine for %s", url.rsplit("@", 1)[-1])
    return engine


class PostgresStores:
    """Product, content, purchase and ownership stores on one engine."""

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine
        self._sessions: async_sessionmaker[AsyncSession] = async_sessionmaker(
            bind=engine, class_=AsyncSession, expire_on_commit=False,
        )
        self.products = SqlProductStore(self._sessions)
        self.content_units = SqlContentUnitStore(self._sessions)
        self.ledger = SqlPurchaseLedger(self._sessions)
        self.ownership = SqlOwnershipStore(self._sessions)

    @classmethod
    def from_url(cls, url: str, *, echo: bool = False, **engine_kwargs) -> PostgresStores:
        return cls(create_engine(url, echo=echo, **engine_kwargs))

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @property
    def sessions(self) -> async_sessionmaker[AsyncSession]:
        return self._sessions

    async def create_tables(self) -> None:
        """Create missing tables; for development databases without alembic."""
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Catalog tables created or already present")

    async def dispose(self) -> None:
        await self._engine.dispose()
        logger.info("Catalog database engine disposed")
