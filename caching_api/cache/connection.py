"""
Redis connection ownership.

RedisConnection owns one connection pool for the lifetime of the app:
the app factory creates it, startup initializes it, shutdown closes it.
Request handlers reach it through FastAPI dependencies.
"""

from typing import Any, Optional

import redis
from redis.exceptions import RedisError

from caching_api.config import Settings, get_settings
from caching_api.logging import get_logger

logger = get_logger("cache.connection")


class RedisConnection:
    """
    Redis connection pool with availability tracking.

    Initialization never raises: an unreachable Redis is logged and the
    pool is kept, so later commands fail fast and get absorbed by CacheStore.
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self._pool: Optional[redis.ConnectionPool] = None
        self._available: bool = False

    def initialize(self) -> bool:
        """
        Create the connection pool and ping Redis.

        Returns:
            True if Redis is available and connected, False otherwise
        """
        if not self.settings.cache_enabled:
            logger.info("cache_disabled")
            return False

        if self._pool is None:
            self._pool = redis.ConnectionPool(
                host=self.settings.redis_host,
                port=self.settings.redis_port,
                db=self.settings.redis_db,
                password=self.settings.redis_password,
                max_connections=self.settings.redis_max_connections,
                socket_timeout=self.settings.redis_socket_timeout,
                socket_connect_timeout=self.settings.redis_socket_timeout,
                decode_responses=False,  # CacheStore works with bytes
            )

        return self.ping()

    def ping(self) -> bool:
        """Refresh availability with a PING."""
        client = self.client
        if client is None:
            self._available = False
            return False

        try:
            client.ping()
        except RedisError as e:
            logger.warning(
                "redis_connection_failed",
                host=self.settings.redis_host,
                port=self.settings.redis_port,
                error=str(e),
            )
            self._available = False
            return False

        if not self._available:
            logger.info("redis_connected", host=self.settings.redis_host, port=self.settings.redis_port)
        self._available = True
        return True

    @property
    def client(self) -> Optional[redis.Redis]:
        """Redis client bound to the pool, or None before initialize()."""
        if self._pool is None:
            return None
        return redis.Redis(connection_pool=self._pool)

    @property
    def is_available(self) -> bool:
        """Result of the most recent ping."""
        return self._available

    def close(self) -> None:
        """Disconnect every pooled connection."""
        if self._pool is not None:
            self._pool.disconnect()
            self._pool = None
        self._available = False

    def health_check(self) -> dict[str, Any]:
        """
        Get cache health status.

        Returns:
            Dictionary with health information
        """
        status: dict[str, Any] = {"enabled": self.settings.cache_enabled}

        if not self.ping():
            status["status"] = "unavailable"
            return status

        client = self.client
        try:
            memory_info = client.info("memory")
            clients_info = client.info("clients")
        except RedisError:
            status["status"] = "degraded"
            return status

        status["memory_used"] = memory_info.get("used_memory_human", "unknown")
        status["connected_clients"] = clients_info.get("connected_clients", 0)
        status["status"] = "healthy"
        return status


__all__ = ["RedisConnection"]
