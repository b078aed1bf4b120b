"""Time source for created_at / updated_at stamps.

Orchestrators and stores take an ``IClock`` so tests can pin record times
with :class:`FixedClock`; production code gets :class:`WallClock`.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Protocol


class IClock(Protocol):
    def now(self) -> datetime:
        """UTC-aware current time."""
        ...


class WallClock:
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """Stands still at *start* until :meth:`advance` is called."""

    def __init__(self, start: datetime | None = None) -> None:
        self._current = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self._current

    def advance(self, seconds: float) -> None:
        if seconds < 0:
            raise ValueError(f"FixedClock only moves forward, got {seconds}s")
        self._current += timedelta(seconds=seconds)
