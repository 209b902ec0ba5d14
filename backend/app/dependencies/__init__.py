"""
FastAPI dependency injection module.

Provides centralized dependencies for:
- Database sessions
- Repositories
- The cache store
- Services
"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from caching_api.cache import CacheStore, RedisConnection
from caching_api.db import get_db
from caching_api.repositories import DriverRepository
from caching_api.services import DriverService

# =============================================================================
# Repository Dependencies
# =============================================================================


def get_driver_repository(db: Session = Depends(get_db)) -> DriverRepository:
    """Get DriverRepository instance."""
    return DriverRepository(db)


# =============================================================================
# Cache Dependencies
# =============================================================================


def get_redis_connection(request: Request) -> RedisConnection:
    """The app-owned Redis connection created by create_app()."""
    return request.app.state.redis


def get_cache_store(
    connection: RedisConnection = Depends(get_redis_connection),
) -> CacheStore:
    """Get a CacheStore bound to the app's connection pool."""
    return CacheStore(connection.client)


# =============================================================================
# Service Dependencies
# =============================================================================


def get_driver_service(
    request: Request,
    repository: DriverRepository = Depends(get_driver_repository),
    cache: CacheStore = Depends(get_cache_store),
) -> DriverService:
    """Get DriverService instance with injected repository and cache."""
    return DriverService(repository, cache, ttl=request.app.state.settings.cache_ttl)


__all__ = [
    "get_driver_repository",
    "get_redis_connection",
    "get_cache_store",
    "get_driver_service",
]
