"""
Background Task Tracker

Runs fire-and-forget work (artifact cache writes) after the response has
been returned, while keeping a strong reference to every task so none is
garbage-collected mid-flight and the application can drain them on
shutdown.

STAGE-BG: Background work
-------------------------
BG.1: Task spawned
BG.2: Task finished (success or logged failure)
BG.3: Drain on shutdown

Author: System Architect
Date: 2025-12-09
"""

import asyncio
from collections.abc import Callable, Coroutine
from typing import Any

from src.core.config.constants import Stage
from src.core.logging.logger import get_logger, log_stage

logger = get_logger(__name__)


class BackgroundTaskTracker:
    """
    Owns background tasks spawned on the running event loop.

    Failures are logged and counted; they never propagate to the request
    that spawned the task.

    Usage:
        tracker = BackgroundTaskTracker()
        tracker.spawn(store.put(key, artifact), name="cache-put")
        ...
        await tracker.drain(timeout=10.0)
    """

    def __init__(self, on_change: Callable[[int], None] | None = None):
        """
        Args:
            on_change: Optional callback receiving the pending count
                whenever it changes (used for a gauge metric)
        """
        self._tasks: set[asyncio.Task] = set()
        self._on_change = on_change
        self.completed = 0
        self.failed = 0

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def spawn(self, coro: Coroutine[Any, Any, Any], name: str | None = None) -> asyncio.Task:
        """
        Schedule ``coro`` and track it until it finishes.

        STAGE-BG.1: Task spawned
        """
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        self._notify()
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        """STAGE-BG.2: Task finished."""
        self._tasks.discard(task)
        self._notify()

        if task.cancelled():
            log_stage(
                logger, Stage.CACHE_POPULATION, "Background task cancelled",
                level="warning", task=task.get_name(),
            )
            self.failed += 1
            return

        exc = task.exception()
        if exc is not None:
            self.failed += 1
            log_stage(
                logger,
                Stage.CACHE_POPULATION,
                "Background task failed",
                level="error",
                task=task.get_name(),
                error=str(exc),
                error_type=type(exc).__name__,
            )
        else:
            self.completed += 1

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(len(self._tasks))

    async def drain(self, timeout: float | None = None) -> int:
        """
        Wait for pending tasks, cancelling whatever is left after ``timeout``.

        STAGE-BG.3: Drain on shutdown

        Returns:
            int: Number of tasks cancelled because the timeout elapsed
        """
        if not self._tasks:
            return 0

        log_stage(logger, Stage.CACHE_POPULATION, "Draining background tasks", pending=len(self._tasks))

        _, still_pending = await asyncio.wait(set(self._tasks), timeout=timeout)
        for task in still_pending:
            task.cancel()
        if still_pending:
            await asyncio.gather(*still_pending, return_exceptions=True)
            log_stage(
                logger,
                Stage.CACHE_POPULATION,
                "Background tasks cancelled at shutdown",
                level="warning",
                cancelled=len(still_pending),
            )
        return len(still_pending)
