"""Fire-and-forget task runner for best-effort side effects.

Spawned coroutines run independently of the caller.  Their failures are
logged, never raised.  Strong references are held until each task finishes
so the event loop cannot garbage-collect them mid-flight.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Coroutine

logger = logging.getLogger(__name__)


class BackgroundTasks:
    """Owns in-flight side-effect tasks."""

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[Any]] = set()
        self._completed: int = 0
        self._failed: int = 0

    def spawn(self, coro: Coroutine[Any, Any, Any], *, name: str) -> asyncio.Task[Any]:
        """Schedule *coro* and return immediately."""
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.warning("Background task cancelled: %s", task.get_name())
            return
        exc = task.exception()
        if exc is not None:
            self._failed += 1
            logger.error(
                "Background task failed: %s error=%s",
                task.get_name(), exc, exc_info=exc,
            )
            return
        self._completed += 1

    async def drain(self) -> None:
        """Wait for every pending task to settle."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # ---- Introspection ----

    @property
    def pending(self) -> int:
        return len(self._tasks)

    @property
    def completed(self) -> int:
        return self._completed

    @property
    def failed(self) -> int:
        return self._failed
