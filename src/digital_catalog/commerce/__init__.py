"""Commerce subsystem: one-time product purchases.

- **Pricing**: preorder-aware effective price in minor units
- **Purchase orchestrator**: idempotent charge-then-record workflow
- **Background tasks**: fire-and-forget side effects with logged failures
- **Ledger**: purchase records unique per (user, product)
"""

from digital_catalog.commerce.background import BackgroundTasks
from digital_catalog.commerce.ledger import MemoryOwnershipStore, MemoryPurchaseLedger
from digital_catalog.commerce.pricing import EffectivePrice, effective_price
from digital_catalog.commerce.purchase import PurchaseAttempt, PurchaseOrchestrator

__all__ = [
    "BackgroundTasks",
    "EffectivePrice",
    "MemoryOwnershipStore",
    "MemoryPurchaseLedger",
    "PurchaseAttempt",
    "PurchaseOrchestrator",
    "effective_price",
]
