"""
Drivers Caching API Core Library.

This package provides the cache-aside core behind the drivers API,
including configuration, logging, database management, models,
repositories, the Redis cache facade and the driver service.

Usage:
    # Database
    from caching_api.db import db, get_db
    from caching_api.models import Driver
    from caching_api.repositories import DriverRepository

    # Cache
    from caching_api.cache import CacheStore, CacheKeys, RedisConnection

    # Services
    from caching_api.services import DriverService

    # Config / Logging
    from caching_api.config import get_settings
    from caching_api.logging import get_logger, configure_logging
"""

__version__ = "1.0.0"

# Users should import directly from submodules:
#   from caching_api.db import db
#   from caching_api.config import get_settings
#   from caching_api.logging import get_logger
