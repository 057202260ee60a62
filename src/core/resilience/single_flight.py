"""
Single-Flight Request Collapsing

When several requests miss the cache for the same key at once, only the
first (the leader) starts a render; the others (followers) await the same
render.

The render runs as a task owned by the registry, not by the leader's
request. Every caller awaits it through ``asyncio.shield``, so a caller
that is cancelled (client disconnect) stops waiting without cancelling
the render the other callers still need.

The registry is confined to one event loop and holds an entry only while
a render is in flight.

Author: System Architect
Date: 2025-12-10
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

from src.core.config.constants import Stage
from src.core.logging.logger import get_logger, log_stage

logger = get_logger(__name__)

T = TypeVar("T")


class SingleFlight(Generic[T]):
    """
    Per-key in-flight registry.

    Usage:
        flights = SingleFlight()
        outcome, leader = await flights.run(cache_key, lambda: renderer.render(d))
    """

    def __init__(self):
        self._inflight: dict[str, asyncio.Task] = {}

    def __len__(self) -> int:
        return len(self._inflight)

    async def run(self, key: str, fn: Callable[[], Awaitable[T]]) -> tuple[T, bool]:
        """
        Run ``fn`` unless a call for ``key`` is already in flight.

        Returns:
            (result, is_leader): followers get the leader's result with
            ``is_leader=False``. An exception raised by ``fn`` is raised in
            every caller.
        """
        existing = self._inflight.get(key)
        if existing is not None:
            log_stage(logger, Stage.SINGLE_FLIGHT, "Joining in-flight render", cache_key=key[:60])
            return await asyncio.shield(existing), False

        task = asyncio.ensure_future(fn())
        self._inflight[key] = task
        task.add_done_callback(lambda done: self._release(key, done))
        return await asyncio.shield(task), True

    def _release(self, key: str, task: asyncio.Task) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]
        # Mark retrieved: every waiter may have been cancelled before it finished
        if not task.cancelled():
            task.exception()
