"""Redis-backed ephemeral store for replication lookup entries and new-story markers.

Values are JSON-encoded and every key is namespaced with
settings.cache_key_prefix, so the upload side and this service agree on
the stored format. Unlike a best-effort cache, a miss here changes
behaviour: get/set/consume raise CacheUnavailableError when Redis cannot
be reached so the request fails with 500 and the provider redelivers.
delete is cleanup only and never raises.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import redis.asyncio as redis

from app.core.config import Settings, get_settings
from app.infrastructure.exceptions import CacheUnavailableError

logger = logging.getLogger(__name__)


class CacheService:
    """Async Redis store with TTL support and atomic consume.

    Call connect() at startup and disconnect() at shutdown.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize cache service.

        Args:
            redis_client: Optional Redis client for testing or DI.
            settings: Optional settings; defaults to get_settings().
        """
        self.redis = redis_client
        self.settings = settings or get_settings()
        self.prefix = self.settings.cache_key_prefix
        self._connected = redis_client is not None

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    async def connect(self) -> None:
        """Establish Redis connection. Call on app startup."""
        if not self.settings.redis_enabled:
            logger.warning("Redis disabled (REDIS_ENABLED=false); replication tracking is unavailable")
            return
        if self.redis is None:
            try:
                self.redis = redis.Redis(
                    host=self.settings.redis_host,
                    port=self.settings.redis_port,
                    db=self.settings.redis_db,
                    password=self.settings.redis_password.get_secret_value() if self.settings.redis_password else None,
                    decode_responses=True,
                    socket_connect_timeout=5,
                    socket_keepalive=True,
                )
                await self.redis.ping()
                self._connected = True
                logger.info(
                    "Redis connected: %s:%s",
                    self.settings.redis_host,
                    self.settings.redis_port,
                )
            except (redis.ConnectionError, redis.TimeoutError) as e:
                logger.warning("Redis connection failed: %s. Will retry on first use.", e)
                self._connected = False
                self.redis = None

    async def disconnect(self) -> None:
        """Close Redis connection. Call on app shutdown."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None
            self._connected = False
            logger.info("Redis disconnected")

    async def _reconnect(self) -> bool:
        """Drop the current client and connect again. Returns True if reconnected."""
        if self.redis is not None:
            try:
                await self.redis.aclose()
            except redis.RedisError:
                logger.debug("Error closing stale Redis client", exc_info=True)
        self.redis = None
        self._connected = False
        await self.connect()
        return self._connected

    def is_available(self) -> bool:
        """Return True if Redis is connected and usable."""
        return self._connected and self.redis is not None

    async def _ensure_available(self, operation: str, key: str) -> redis.Redis:
        if not self.is_available() and not await self._reconnect():
            logger.error("Cache %s unavailable for key %s", operation, key)
            raise CacheUnavailableError(operation, key)
        assert self.redis is not None
        return self.redis

    async def get(self, key: str) -> Any | None:
        """Return the stored value (JSON-deserialized) or None if missing.

        Raises:
            CacheUnavailableError: Redis cannot be reached.
        """
        client = await self._ensure_available("get", key)
        try:
            value = await client.get(self._key(key))
        except (redis.ConnectionError, redis.TimeoutError) as e:
            if not await self._reconnect() or self.redis is None:
                raise CacheUnavailableError("get", key) from e
            value = await self.redis.get(self._key(key))
        except redis.RedisError as e:
            logger.exception("Cache get error for key %s", key)
            raise CacheUnavailableError("get", key) from e

        if value is None:
            logger.debug("Cache MISS: %s", key)
            return None
        logger.debug("Cache HIT: %s", key)
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            logger.warning("Cache value for key %s is not JSON; returning raw string", key)
            return value

    async def set(self, key: str, value: Any, ttl: int) -> bool:
        """Store value with TTL in seconds. Returns True on success.

        Raises:
            CacheUnavailableError: Redis cannot be reached.
        """
        client = await self._ensure_available("set", key)
        serialized = json.dumps(value)
        try:
            await client.setex(self._key(key), ttl, serialized)
        except (redis.ConnectionError, redis.TimeoutError) as e:
            if not await self._reconnect() or self.redis is None:
                raise CacheUnavailableError("set", key) from e
            await self.redis.setex(self._key(key), ttl, serialized)
        except redis.RedisError as e:
            logger.exception("Cache set error for key %s", key)
            raise CacheUnavailableError("set", key) from e
        logger.debug("Cache SET: %s (TTL: %ss)", key, ttl)
        return True

    async def delete(self, key: str) -> bool:
        """Remove key. Returns True if a key was deleted; failures are logged only."""
        if not self.is_available() or self.redis is None:
            logger.warning("Cache delete skipped for key %s (Redis disconnected)", key)
            return False
        try:
            removed = await self.redis.delete(self._key(key))
        except redis.RedisError:
            logger.exception("Cache delete error for key %s", key)
            return False
        logger.debug("Cache DELETE: %s (%s removed)", key, removed)
        return removed == 1

    async def consume(self, key: str) -> bool:
        """Atomically delete key; True only for the caller whose DEL removed it.

        Redis executes DEL atomically, so among concurrent callers exactly one
        observes a count of 1.

        Raises:
            CacheUnavailableError: Redis cannot be reached.
        """
        client = await self._ensure_available("consume", key)
        try:
            removed = await client.delete(self._key(key))
        except (redis.ConnectionError, redis.TimeoutError) as e:
            if not await self._reconnect() or self.redis is None:
                raise CacheUnavailableError("consume", key) from e
            removed = await self.redis.delete(self._key(key))
        except redis.RedisError as e:
            logger.exception("Cache consume error for key %s", key)
            raise CacheUnavailableError("consume", key) from e
        logger.debug("Cache CONSUME: %s (%s)", key, "won" if removed == 1 else "absent")
        return removed == 1
