"""Identifiers and timestamps for catalog records.

Record ids are opaque UUID4 strings.  Record timestamps are UTC-aware.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone


def new_id() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def purchase_key(user_id: str, product_id: str) -> str:
    """Key for one (user, product) pair, shared by the ledger and the purchase lock."""
    return f"{user_id}:{product_id}"
