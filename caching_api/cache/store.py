"""
Typed Redis cache facade.

Provides get / set-with-expiry / remove over CacheKey[T], plus the
cache-aside read get_or_load(). Values are stored as JSON produced by the
key's pydantic TypeAdapter.

Failure policy:
- load() is strict and raises CacheUnavailableError / CacheDeserializationError
- get(), set(), remove() and get_or_load() absorb cache failures, log them
  and degrade to a miss or a failed write
"""

import math
from collections.abc import Callable
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Optional, TypeVar

from pydantic import ValidationError
from redis.exceptions import RedisError

from caching_api.logging import get_logger

from .cache_keys import CacheKey
from .exceptions import CacheDeserializationError, CacheUnavailableError

if TYPE_CHECKING:
    import redis

logger = get_logger("cache")

T = TypeVar("T")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def is_not_none(value: Any) -> bool:
    return value is not None


class CacheStore:
    """
    Cache-aside facade over a Redis client.

    Usage:
        store = CacheStore(connection.client)

        store.set(CacheKeys.driver(1), driver, store.now() + timedelta(seconds=30))
        driver = store.get(CacheKeys.driver(1))  # DriverRead or None
        store.remove(CacheKeys.driver(1))

    A None client disables caching: reads miss, writes return False.
    """

    def __init__(
        self,
        client: Optional["redis.Redis"],
        clock: Callable[[], datetime] = utcnow,
    ):
        self.client = client
        self._clock = clock

    def now(self) -> datetime:
        """Current time as seen by this store."""
        return self._clock()

    # =========================================================================
    # Reads
    # =========================================================================

    def load(self, key: CacheKey[T]) -> T | None:
        """
        Strict read.

        Returns:
            The cached value, or None if the key is absent

        Raises:
            CacheUnavailableError: Redis could not be reached
            CacheDeserializationError: the payload is not a valid value of the key's type
        """
        if self.client is None:
            return None

        try:
            data = self.client.get(key.name)
        except RedisError as e:
            raise CacheUnavailableError(str(e), key=key.name) from e

        if data is None:
            return None

        try:
            return key.adapter.validate_json(data)
        except ValidationError as e:
            raise CacheDeserializationError(
                f"cached value for {key.name!r} is not a valid {key.value_type!r}",
                key=key.name,
            ) from e

    def get(self, key: CacheKey[T]) -> T | None:
        """
        Lenient read: absent, unreachable and mismatched entries all return None.
        """
        try:
            value = self.load(key)
        except CacheUnavailableError as e:
            logger.warning("cache_unavailable", operation="get", key=key.name, error=str(e))
            return None
        except CacheDeserializationError as e:
            logger.warning("cache_deserialization_mismatch", key=key.name, error=str(e))
            return None

        logger.debug("cache_hit" if value is not None else "cache_miss", key=key.name)
        return value

    # =========================================================================
    # Writes
    # =========================================================================

    def set(self, key: CacheKey[T], value: T, expires_at: datetime) -> bool:
        """
        Store value under key until expires_at.

        The TTL is expires_at - now(), rounded up to whole milliseconds.
        A naive expires_at is taken as UTC. An expiry at or before now()
        is rejected: nothing is written, any existing entry is dropped and
        False is returned.

        Returns:
            True if cached successfully, False otherwise
        """
        if self.client is None:
            return False

        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)

        ttl_ms = math.ceil((expires_at - self.now()).total_seconds() * 1000)
        if ttl_ms <= 0:
            logger.debug("cache_write_rejected_expired", key=key.name, ttl_ms=ttl_ms)
            self.remove(key)
            return False

        try:
            payload = key.adapter.dump_json(value)
        except (TypeError, ValueError) as e:
            # pydantic's PydanticSerializationError is a ValueError
            logger.warning("cache_serialization_error", key=key.name, error=str(e))
            return False

        try:
            self.client.psetex(key.name, ttl_ms, payload)
        except RedisError as e:
            logger.warning("cache_unavailable", operation="set", key=key.name, error=str(e))
            return False
        return True

    def remove(self, key: CacheKey[Any]) -> bool:
        """
        Delete a key.

        Returns:
            True if an entry existed and was removed, False otherwise
        """
        if self.client is None:
            return False

        try:
            deleted = self.client.delete(key.name)
        except RedisError as e:
            logger.warning("cache_unavailable", operation="remove", key=key.name, error=str(e))
            return False
        return bool(deleted)

    # =========================================================================
    # Cache-aside
    # =========================================================================

    def get_or_load(
        self,
        key: CacheKey[T],
        loader: Callable[[], T],
        expires_at: datetime,
        usable: Callable[[T], bool] = is_not_none,
    ) -> T:
        """
        Return the cached value, or load it and cache the result.

        Args:
            key: Cache key
            loader: Called on a miss; its exceptions propagate
            expires_at: Absolute expiry for a freshly loaded value
            usable: A cached value only counts as a hit if this returns True

        Returns:
            Cached or loaded value
        """
        cached = self.get(key)
        if cached is not None and usable(cached):
            return cached

        value = loader()
        if value is not None and not self.set(key, value, expires_at):
            logger.warning("cache_populate_failed", key=key.name)
        return value


__all__ = ["CacheStore", "utcnow", "is_not_none"]
