"""Content sync: pull a product's chapters from its repository.

A sync run is keyed by the repository's latest commit.  If that commit is
the one already recorded on the product, nothing is written.  Otherwise
every allow-listed top-level file is fetched, parsed and upserted
concurrently, and the product's commit marker is advanced once all of
them have settled.

Per-file failures are isolated: they are logged with the file path and
do not stop the other files or the marker update.  A file that fails on
commit X is not retried until a newer commit arrives.
"""

from __future__ import annotations

import asyncio
import logging

from digital_catalog.core.errors import FileSyncFailed, NoChange, ProductNotFound
from digital_catalog.core.interfaces import (
    IChapterSync,
    IProductStore,
    IVersionControlClient,
    VersionControlClientFactory,
)
from digital_catalog.core.models import Product, RepoEntry, SyncResult
from digital_catalog.observability.logger import request_context

from .frontmatter import parse_chapter
from .selection import select_syncable

logger = logging.getLogger(__name__)


class ContentSyncOrchestrator:
    """Decides whether a sync is needed and fans out file-level syncs.

    Parameters
    ----------
    products:
        Store holding the product's repository reference and commit marker.
    chapter_sync:
        Collaborator that upserts one parsed file.
    client_factory:
        Builds a version-control client for the caller's credential.
    """

    def __init__(
        self,
        products: IProductStore,
        chapter_sync: IChapterSync,
        client_factory: VersionControlClientFactory,
    ) -> None:
        self._products = products
        self._chapter_sync = chapter_sync
        self._client_factory = client_factory

    async def sync(self, product_id: str, credential: str) -> SyncResult:
        """Sync *product_id* from its repository.

        Raises:
            ProductNotFound: The product does not exist.
            NoChange: No commit upstream, or it matches the stored marker.
        """
        with request_context("content_sync", product_id=product_id):
            product = await self._products.get(product_id)
            if product is None:
                raise ProductNotFound(product_id)

            client = self._client_factory(credential)
            repo = product.github_repo

            commit = await client.latest_commit(repo)
            if commit is None:
                raise NoChange(f"No commits found in {repo}")
            if commit.sha == product.github_last_commit_sha:
                raise NoChange(f"{repo} is already at {commit.sha}")

            entries = await client.list_top_level(repo)
            selected = select_syncable(entries)
            skipped = len(entries) - len(selected)
            if skipped:
                logger.debug("Ignoring %d non-chapter entries in %s", skipped, repo)

            results = await asyncio.gather(
                *(self._sync_file(client, product, entry) for entry in selected)
            )
            failures = [r for r in results if r is not None]

            await self._products.update_last_commit(product.id, commit.sha)
            logger.info(
                "Content sync finished repo=%s commit=%s files=%d failed=%d",
                repo, commit.sha, len(selected), len(failures),
            )
            return SyncResult(updated=True, commit_sha=commit.sha)

    async def _sync_file(
        self,
        client: IVersionControlClient,
        product: Product,
        entry: RepoEntry,
    ) -> FileSyncFailed | None:
        """Fetch, parse and apply one file.  Never raises."""
        try:
            raw = await client.fetch_file(product.github_repo, entry.path)
            parsed = parse_chapter(entry.path, raw)
            await self._chapter_sync.apply(product, parsed)
        except Exception as exc:
            failure = FileSyncFailed(entry.path, exc)
            logger.error(
                "Content sync has error path=%s error=%s",
                entry.path, exc, exc_info=exc,
            )
            return failure

        logger.info("Content is synced path=%s", entry.path)
        return None
