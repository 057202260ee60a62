#!/usr/bin/env python3
"""
Two-Tier Artifact Store

Architecture:
    ArtifactCache (Public API, implements ArtifactStore)
        ├── L1Storage (In-memory LRU, per worker)
        └── RedisArtifactStore (Redis hashes, shared)

Redis layout:
    cache:screenshot:{sha256(cache_key)}  HASH
        body  raw image bytes
        meta  orjson document (content_type, headers, created_at)

The cache key itself is an URI that can be several kilobytes long (it
embeds the percent-encoded js/css); hashing keeps Redis keys bounded.

Performance Targets:
    - L1 hit: < 1ms
    - L2 hit: 1-5ms
    - Miss: one upstream render (seconds)

Author: System Architect
Date: 2025-12-13
"""

import asyncio
import hashlib
from collections import OrderedDict
from typing import Any

import orjson

from src.core.config.constants import (
    L1_CACHE_MAX_SIZE,
    REDIS_FIELD_BODY,
    REDIS_FIELD_META,
    REDIS_KEY_SCREENSHOT,
    CacheTier,
    Stage,
)
from src.core.config.settings import Settings
from src.core.exceptions import CacheKeyError
from src.core.interfaces.cache import ArtifactStore, InMemoryArtifactStore
from src.core.logging.logger import get_logger, log_stage
from src.infrastructure.cache.redis_client import RedisClient
from src.screenshot.models import CachedArtifact

logger = get_logger(__name__)


# =============================================================================
# LAYER 1: STORAGE IMPLEMENTATIONS
# =============================================================================


class L1Storage:
    """
    In-memory LRU artifact storage.

    STAGE-4.1: L1 in-memory tier

    This is a per-worker cache, not shared across processes. Entries carry
    no TTL of their own: artifacts are immutable for a given key and the
    LRU bound keeps memory in check.

    Implementation Details:
    - OrderedDict for O(1) access and LRU ordering
    - asyncio.Lock around every mutation
    - Evicts least recently used entries when over capacity
    """

    def __init__(self, max_size: int = L1_CACHE_MAX_SIZE):
        self._max_size = max_size
        self._cache: OrderedDict[str, CachedArtifact] = OrderedDict()
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> CachedArtifact | None:
        async with self._lock:
            if key in self._cache:
                self._cache.move_to_end(key)
                return self._cache[key]
            return None

    async def set(self, key: str, artifact: CachedArtifact) -> None:
        """Store an artifact, evicting the oldest entries if over capacity."""
        if self._max_size <= 0:
            return

        async with self._lock:
            if key in self._cache:
                self._cache.move_to_end(key)

            self._cache[key] = artifact

            while len(self._cache) > self._max_size:
                self._cache.popitem(last=False)

    async def clear(self) -> None:
        async with self._lock:
            self._cache.clear()

    def get_size(self) -> int:
        """Get current number of items in cache."""
        return len(self._cache)

    def get_max_size(self) -> int:
        """Get maximum capacity."""
        return self._max_size


def redis_key_for(cache_key: str) -> str:
    """Map a cache-key URI to its bounded Redis key."""
    digest = hashlib.sha256(cache_key.encode("utf-8")).hexdigest()
    return f"{REDIS_KEY_SCREENSHOT}:{digest}"


class RedisArtifactStore:
    """
    Redis-backed artifact storage.

    STAGE-4.2: L2 Redis tier

    Each artifact is one hash (body + meta), written in a single
    transaction so a reader never sees a body without its metadata.
    """

    def __init__(self, redis_client: RedisClient):
        self._redis = redis_client

    async def get(self, key: str) -> CachedArtifact | None:
        """
        Raises:
            CacheKeyError: Redis failure or an unreadable entry
        """
        name = redis_key_for(key)
        fields = await self._redis.hgetall(name)
        if not fields:
            return None

        body = fields.get(REDIS_FIELD_BODY.encode())
        meta = fields.get(REDIS_FIELD_META.encode())
        if body is None or meta is None:
            raise CacheKeyError(message="Incomplete artifact entry", details={"key": name})

        try:
            return CachedArtifact.from_stored(body, meta)
        except (orjson.JSONDecodeError, ValueError) as e:
            raise CacheKeyError(message=f"Corrupt artifact metadata: {e}", details={"key": name}) from e

    async def lookup(self, key: str) -> tuple[CachedArtifact | None, CacheTier]:
        artifact = await self.get(key)
        return artifact, (CacheTier.L2 if artifact is not None else CacheTier.MISS)

    async def put(self, key: str, artifact: CachedArtifact, ttl: int | None = None) -> None:
        await self._redis.hset_with_ttl(
            redis_key_for(key),
            {REDIS_FIELD_BODY: artifact.body, REDIS_FIELD_META: artifact.metadata_json()},
            ttl=ttl,
        )

    async def health_check(self) -> dict[str, Any]:
        return await self._redis.health_check()


# =============================================================================
# LAYER 2: TIER COORDINATION
# =============================================================================


class ArtifactCache:
    """
    L1 → L2 artifact lookups.

    Algorithm:
        GET: L1 → L2 → miss (warm L1 on L2 hit)
        PUT: L2 first, then L1

    L1 is written only after L2 accepted the artifact, so a failed Redis
    write never leaves this worker serving an artifact other workers
    cannot see.
    """

    def __init__(self, l1: L1Storage, l2: ArtifactStore):
        self._l1 = l1
        self._l2 = l2

    async def lookup(self, key: str) -> tuple[CachedArtifact | None, CacheTier]:
        """
        Get an artifact and the tier that served it.

        STAGE-4.1: L1 lookup
        STAGE-4.2: L2 lookup (if L1 miss)
        """
        artifact = await self._l1.get(key)
        if artifact is not None:
            return artifact, CacheTier.L1

        artifact = await self._l2.get(key)
        if artifact is not None:
            await self._l1.set(key, artifact)
            return artifact, CacheTier.L2

        return None, CacheTier.MISS

    async def get(self, key: str) -> CachedArtifact | None:
        artifact, _ = await self.lookup(key)
        return artifact

    async def put(self, key: str, artifact: CachedArtifact, ttl: int | None = None) -> None:
        await self._l2.put(key, artifact, ttl=ttl)
        await self._l1.set(key, artifact)

    async def health_check(self) -> dict[str, Any]:
        health = await self._l2.health_check()
        health["l1_size"] = self._l1.get_size()
        health["l1_max_size"] = self._l1.get_max_size()
        return health


# =============================================================================
# FACTORY
# =============================================================================


async def build_artifact_store(
    settings: Settings, redis_client: RedisClient | None = None
) -> tuple[ArtifactStore, RedisClient | None]:
    """
    Build the artifact store selected by CACHE_BACKEND.

    STAGE-0.4: Artifact store initialization

    Returns:
        (store, redis_client): the client is None for the memory backend and
        must be disconnected by the caller on shutdown otherwise.

    Raises:
        CacheConnectionError: Redis backend selected but unreachable
    """
    cache_settings = settings.cache

    if cache_settings.CACHE_BACKEND == "memory":
        log_stage(logger, Stage.INITIALIZATION, "Using in-memory artifact store")
        return InMemoryArtifactStore(max_entries=max(cache_settings.CACHE_L1_MAX_SIZE, 1)), None

    client = redis_client or RedisClient(settings)
    await client.connect()

    store = ArtifactCache(
        l1=L1Storage(max_size=cache_settings.CACHE_L1_MAX_SIZE),
        l2=RedisArtifactStore(client),
    )
    log_stage(
        logger,
        Stage.INITIALIZATION,
        "Using Redis artifact store",
        l1_max_size=cache_settings.CACHE_L1_MAX_SIZE,
        ttl=cache_settings.CACHE_ARTIFACT_TTL,
    )
    return store, client
