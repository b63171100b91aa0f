"""Cache: Redis-backed ephemeral store (lookup entries, new-story markers).

CacheService implements IEphemeralStore; key formats live with
ReplicationMarkers in the application layer.
"""

from app.infrastructure.cache.redis_cache import CacheService

__all__ = [
    "CacheService",
]
