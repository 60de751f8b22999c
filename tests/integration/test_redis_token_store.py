"""
Integration tests for the Redis token store.

Requires Redis running on localhost:6379
Skip tests if Redis is not available.
"""

import pytest
import redis
from mesh_session.adapters import RedisTokenStore
from mesh_session.domain.token import TokenPair


PREFIX = "test:mesh:token:"


@pytest.fixture
def redis_store():
    """Create Redis token store (skip if Redis unavailable)."""
    r = redis.Redis(host="localhost", port=6379, decode_responses=True)
    try:
        r.ping()
    except redis.exceptions.ConnectionError:
        pytest.skip("Redis not available")

    yield RedisTokenStore(redis_url="redis://localhost:6379/0", prefix=PREFIX)

    # Cleanup: delete all test token pairs
    for key in r.scan_iter(f"{PREFIX}*"):
        r.delete(key)
    r.close()


class TestRedisTokenStore:
    """Test Redis token pair storage."""

    @pytest.mark.asyncio
    async def test_save_and_get(self, redis_store):
        """Test a stored pair reads back intact."""
        tokens = TokenPair(access_token="at", refresh_token="rt", scope="mesh.api")

        await redis_store.save("auth_1", tokens)
        loaded = await redis_store.get("auth_1")

        assert loaded.access_token == "at"
        assert loaded.refresh_token == "rt"
        assert loaded.scope == "mesh.api"

    @pytest.mark.asyncio
    async def test_get_missing(self, redis_store):
        """Test unknown ids read as None."""
        assert await redis_store.get("missing") is None

    @pytest.mark.asyncio
    async def test_save_with_ttl(self, redis_store):
        """Test a TTL is applied to the key."""
        await redis_store.save("auth_1", TokenPair(access_token="at"), ttl=60)

        ttl = await redis_store._get_redis().ttl(f"{PREFIX}auth_1")
        assert 0 < ttl <= 60

    @pytest.mark.asyncio
    async def test_delete(self, redis_store):
        """Test deletion reports whether a pair existed."""
        await redis_store.save("auth_1", TokenPair(access_token="at"))

        assert await redis_store.delete("auth_1") is True
        assert await redis_store.delete("auth_1") is False
        assert await redis_store.get("auth_1") is None

    @pytest.mark.asyncio
    async def test_unreadable_entry(self, redis_store):
        """Test a corrupt entry reads as None."""
        await redis_store._get_redis().set(f"{PREFIX}auth_1", "not json")

        assert await redis_store.get("auth_1") is None
