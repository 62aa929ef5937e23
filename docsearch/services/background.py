"""Fire-and-forget writer for search log side effects.

Log writes must never delay or fail the search response. Coroutines submitted
here run as asyncio tasks; the writer keeps a reference until each finishes
(so it is not garbage-collected mid-flight) and drains any exception into the
operational log. No ordering is guaranteed between the response and the write.
"""

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

logger = logging.getLogger(__name__)


class BackgroundWriter:
    """Tracks background log writes and reports their failures."""

    def __init__(self):
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def submit(self, coro: Coroutine[Any, Any, Any], label: str = "search_log") -> asyncio.Task:
        task = asyncio.create_task(coro, name=label)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.debug("Background write cancelled | task=%s", task.get_name())
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Background write failed | task=%s | %s", task.get_name(), str(exc)[:200])

    async def drain(self) -> None:
        """Wait for every pending write to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
