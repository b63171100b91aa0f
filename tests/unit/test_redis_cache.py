"""CacheService tests with a mocked Redis client: prefixing, JSON values, consume and outages."""

from unittest.mock import AsyncMock

import pytest
import redis.asyncio as redis

from app.core.config import Settings
from app.infrastructure.cache.redis_cache import CacheService
from app.infrastructure.exceptions import CacheUnavailableError


@pytest.fixture
def redis_client():
    """Mock async Redis client."""
    client = AsyncMock()
    client.get = AsyncMock(return_value=None)
    client.setex = AsyncMock(return_value=True)
    client.delete = AsyncMock(return_value=1)
    return client


@pytest.fixture
def cache(redis_client) -> CacheService:
    return CacheService(redis_client=redis_client, settings=Settings(cache_key_prefix="sealed_love:"))


async def test_set_stores_json_with_ttl_under_prefix(cache: CacheService, redis_client) -> None:
    assert await cache.set("replicate:FILE1", "A1", 3600) is True
    redis_client.setex.assert_awaited_once_with("sealed_love:replicate:FILE1", 3600, '"A1"')


async def test_get_decodes_json_and_falls_back_to_raw(cache: CacheService, redis_client) -> None:
    """Values written by the upload side as JSON are decoded; plain strings are returned as is."""
    redis_client.get = AsyncMock(return_value="true")
    assert await cache.get("new_story:S1") is True
    redis_client.get = AsyncMock(return_value="A1")
    assert await cache.get("replicate:FILE1") == "A1"
    redis_client.get = AsyncMock(return_value=None)
    assert await cache.get("replicate:FILE2") is None


async def test_consume_true_only_when_key_removed(cache: CacheService, redis_client) -> None:
    assert await cache.consume("new_story:S1") is True
    redis_client.delete.assert_awaited_once_with("sealed_love:new_story:S1")
    redis_client.delete = AsyncMock(return_value=0)
    assert await cache.consume("new_story:S1") is False


async def test_consume_error_raises(cache: CacheService, redis_client) -> None:
    """A Redis error during consume must not be read as 'marker absent'."""
    redis_client.delete = AsyncMock(side_effect=redis.ResponseError("READONLY"))
    with pytest.raises(CacheUnavailableError):
        await cache.consume("new_story:S1")


async def test_consume_retries_once_after_reconnect(cache: CacheService, redis_client) -> None:
    """A dropped connection during consume is retried on the fresh connection."""
    redis_client.delete = AsyncMock(side_effect=[redis.ConnectionError("reset"), 1])
    cache._reconnect = AsyncMock(return_value=True)
    assert await cache.consume("new_story:S1") is True
    cache._reconnect.assert_awaited_once()
    assert redis_client.delete.await_count == 2


async def test_consume_raises_when_reconnect_fails(cache: CacheService, redis_client) -> None:
    redis_client.delete = AsyncMock(side_effect=redis.TimeoutError("slow"))
    cache._reconnect = AsyncMock(return_value=False)
    with pytest.raises(CacheUnavailableError):
        await cache.consume("new_story:S1")


async def test_delete_error_is_swallowed(cache: CacheService, redis_client) -> None:
    redis_client.delete = AsyncMock(side_effect=redis.ResponseError("READONLY"))
    assert await cache.delete("replicate:FILE1") is False


async def test_operations_without_redis_raise_unavailable() -> None:
    """With Redis disabled, reads and writes raise and delete reports False."""
    cache = CacheService(settings=Settings(redis_enabled=False))
    await cache.connect()
    assert cache.is_available() is False
    with pytest.raises(CacheUnavailableError):
        await cache.get("replicate:FILE1")
    with pytest.raises(CacheUnavailableError):
        await cache.set("replicate:FILE1", "A1", 60)
    with pytest.raises(CacheUnavailableError):
        await cache.consume("new_story:S1")
    assert await cache.delete("replicate:FILE1") is False


async def test_disconnect_closes_client(cache: CacheService, redis_client) -> None:
    await cache.disconnect()
    redis_client.aclose.assert_awaited_once()
    assert cache.is_available() is False
