"""Catalog subsystem: products and their repository-backed chapters.

- **Content sync**: pull chapters from a product's repository per commit
- **Chapter sync**: upsert one parsed file as a content unit
- **Product catalog**: list, lookup by slug, add and edit products
"""

from digital_catalog.catalog.chapter_sync import StoreChapterSync
from digital_catalog.catalog.content_sync import ContentSyncOrchestrator
from digital_catalog.catalog.memory_store import MemoryContentUnitStore, MemoryProductStore
from digital_catalog.catalog.products import ProductCatalog

__all__ = [
    "ContentSyncOrchestrator",
    "MemoryContentUnitStore",
    "MemoryProductStore",
    "ProductCatalog",
    "StoreChapterSync",
]
