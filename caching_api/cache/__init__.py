"""
Redis Caching Layer.

Provides a typed cache-aside facade over Redis:
- CacheKey[T] binds a key name to its value type
- CacheStore reads, writes with absolute expiry, and removes entries
- RedisConnection owns the connection pool

Usage:
    from caching_api.cache import CacheKeys, CacheStore

    store = CacheStore(connection.client)
    store.set(CacheKeys.DRIVERS, drivers, store.now() + timedelta(seconds=30))
    drivers = store.get(CacheKeys.DRIVERS)
"""

from caching_api.cache.cache_keys import CacheKey, CacheKeys
from caching_api.cache.connection import RedisConnection
from caching_api.cache.exceptions import (
    CacheDeserializationError,
    CacheError,
    CacheUnavailableError,
)
from caching_api.cache.store import CacheStore

__all__ = [
    "CacheKey",
    "CacheKeys",
    "CacheStore",
    "RedisConnection",
    "CacheError",
    "CacheUnavailableError",
    "CacheDeserializationError",
]
