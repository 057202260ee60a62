"""
Integration Tests for the Redis-backed Artifact Cache

Requires a Redis reachable at REDIS_HOST/REDIS_PORT.
"""

import uuid

import pytest

from src.core.config.constants import CacheTier
from src.infrastructure.cache.artifact_store import ArtifactCache, L1Storage, RedisArtifactStore, redis_key_for
from src.infrastructure.cache.redis_client import RedisClient
from src.screenshot.models import CachedArtifact
from tests.test_fixtures import PNG_BYTES


@pytest.fixture
async def redis_client(test_settings, use_real_redis):
    if not use_real_redis:
        pytest.skip("USE_REAL_REDIS not set")

    client = RedisClient(test_settings)
    await client.connect()
    yield client
    await client.disconnect()


@pytest.mark.integration
class TestRedisArtifactCache:
    async def test_binary_body_round_trip(self, redis_client):
        key = f"https://screenshot-cache.test.local/{uuid.uuid4()}"
        store = RedisArtifactStore(redis_client)
        artifact = CachedArtifact(body=PNG_BYTES + bytes(range(256)), headers={"content-type": "image/png"})

        try:
            await store.put(key, artifact, ttl=60)
            loaded = await store.get(key)
        finally:
            await redis_client.delete(redis_key_for(key))

        assert loaded.body == artifact.body
        assert loaded.headers == artifact.headers

    async def test_second_worker_sees_first_workers_write(self, redis_client):
        key = f"https://screenshot-cache.test.local/{uuid.uuid4()}"
        worker_a = ArtifactCache(L1Storage(4), RedisArtifactStore(redis_client))
        worker_b = ArtifactCache(L1Storage(4), RedisArtifactStore(redis_client))

        try:
            await worker_a.put(key, CachedArtifact(body=PNG_BYTES), ttl=60)
            artifact, tier = await worker_b.lookup(key)
        finally:
            await redis_client.delete(redis_key_for(key))

        assert tier is CacheTier.L2
        assert artifact.body == PNG_BYTES

    async def test_health_check(self, redis_client):
        health = await redis_client.health_check()

        assert health["status"] == "healthy"
        assert health["connected"] is True
