"""
Cache Module

Artifact storage (L1 in-memory + L2 Redis) and cache key derivation.
"""

from .artifact_store import (
    ArtifactCache,
    L1Storage,
    RedisArtifactStore,
    build_artifact_store,
)
from .cache_key import derive_cache_key
from .redis_client import RedisClient

__all__ = [
    "ArtifactCache",
    "L1Storage",
    "RedisArtifactStore",
    "RedisClient",
    "build_artifact_store",
    "derive_cache_key",
]
