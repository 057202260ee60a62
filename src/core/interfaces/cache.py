"""
Artifact Store Protocol

This module defines the protocol every artifact store implements, so the
cache-aside controller can be given Redis in production and an in-memory
store in development and tests.

Architectural Decision: Protocol-based abstraction
- Enables multiple store implementations (Redis, in-memory)
- Facilitates testing with mock implementations
- Follows dependency inversion principle
- Type-safe interface with runtime checking

Author: System Architect
Date: 2025-12-08
"""

import time
from collections import OrderedDict
from typing import Any, Protocol, runtime_checkable

from src.core.config.constants import CacheTier
from src.screenshot.models import CachedArtifact


@runtime_checkable
class ArtifactStore(Protocol):
    """
    Protocol defining the key/value capability the controller depends on.

    Implementations:
    - ArtifactCache: L1 in-process LRU in front of Redis (production)
    - InMemoryArtifactStore: single-process store (development, tests)

    Contract:
    - ``get`` returns None on a miss and raises CacheError on failure
    - ``lookup`` is ``get`` plus the tier that served the artifact
    - ``put`` overwrites idempotently; eviction is the store's own policy
    """

    async def get(self, key: str) -> CachedArtifact | None:
        """
        Look up an artifact.

        Raises:
            CacheError: If the store cannot be read
        """
        ...

    async def lookup(self, key: str) -> tuple[CachedArtifact | None, CacheTier]:
        """
        Look up an artifact and report where it came from.

        Returns:
            (artifact, tier): ``(None, CacheTier.MISS)`` on a miss

        Raises:
            CacheError: If the store cannot be read
        """
        ...

    async def put(self, key: str, artifact: CachedArtifact, ttl: int | None = None) -> None:
        """
        Store an artifact under ``key``.

        Args:
            key: Cache key
            artifact: Artifact to store
            ttl: Time-to-live in seconds (None or 0 = no expiry)

        Raises:
            CacheError: If the write fails
        """
        ...

    async def health_check(self) -> dict[str, Any]:
        """
        Report store health.

        Returns:
            Dict with at least a "status" entry
        """
        ...


class InMemoryArtifactStore:
    """
    Simple in-memory artifact store.

    Implements the ArtifactStore protocol without external dependencies.
    Bounded by ``max_entries`` (LRU eviction) and honours TTLs lazily on
    read. Not shared across processes.
    """

    def __init__(self, max_entries: int = 1024):
        self._max_entries = max_entries
        self._store: OrderedDict[str, tuple[CachedArtifact, float | None]] = OrderedDict()

    async def get(self, key: str) -> CachedArtifact | None:
        entry = self._store.get(key)
        if entry is None:
            return None

        artifact, expires_at = entry
        if expires_at is not None and time.monotonic() >= expires_at:
            del self._store[key]
            return None

        self._store.move_to_end(key)
        return artifact

    async def lookup(self, key: str) -> tuple[CachedArtifact | None, CacheTier]:
        artifact = await self.get(key)
        return artifact, (CacheTier.L1 if artifact is not None else CacheTier.MISS)

    async def put(self, key: str, artifact: CachedArtifact, ttl: int | None = None) -> None:
        expires_at = time.monotonic() + ttl if ttl else None
        self._store[key] = (artifact, expires_at)
        self._store.move_to_end(key)

        while len(self._store) > self._max_entries:
            self._store.popitem(last=False)

    async def health_check(self) -> dict[str, Any]:
        return {
            "status": "healthy",
            "backend": "memory",
            "entries": len(self._store),
            "max_entries": self._max_entries,
        }

    def __len__(self) -> int:
        return len(self._store)
