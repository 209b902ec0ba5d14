"""
Driver service with cache-aside reads and commit-then-invalidate writes.

Reads go to Redis first and fall back to the database, republishing what
they load. Writes commit to the database first and only then touch the
cache, so a failed commit never leaves a cached record behind.

Consistency windows, each bounded by one TTL:

- A reader that loaded the driver list before a commit can still write
  that list to `drivers` after the writer's invalidation.
- A get_driver that loaded a driver before remove_driver committed can
  write it back to `driver{id}` after the removal, so a deleted driver
  may still be served until the entry expires.
"""

from datetime import datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError

from caching_api.cache import CacheKeys, CacheStore
from caching_api.logging import get_logger
from caching_api.repositories import DriverRepository
from caching_api.schemas import DriverCreate, DriverRead

logger = get_logger("service.driver")

DEFAULT_TTL = timedelta(seconds=30)


def _non_empty(drivers: list[DriverRead]) -> bool:
    return len(drivers) > 0


class DriverService:
    """Cache-aside orchestration over DriverRepository and CacheStore."""

    def __init__(
        self,
        repository: DriverRepository,
        cache: CacheStore,
        ttl: timedelta = DEFAULT_TTL,
    ):
        self.repository = repository
        self.cache = cache
        self.ttl = ttl

    def _expires_at(self) -> datetime:
        return self.cache.now() + self.ttl

    def list_drivers(self) -> list[DriverRead]:
        """
        All drivers, served from the cache when a non-empty list is cached.

        An empty cached list counts as a miss so it can never hide rows
        added since it was cached.
        """
        return self.cache.get_or_load(
            CacheKeys.DRIVERS,
            self._load_all,
            self._expires_at(),
            usable=_non_empty,
        )

    def get_driver(self, driver_id: int) -> DriverRead | None:
        """A single driver via its record key, or None if it does not exist."""
        return self.cache.get_or_load(
            CacheKeys.driver(driver_id),
            lambda: self._load_one(driver_id),
            self._expires_at(),
        )

    def add_driver(self, payload: DriverCreate) -> DriverRead:
        """
        Persist a driver, then cache it under its record key.

        Raises:
            SQLAlchemyError: the insert or commit failed; the cache is untouched
        """
        try:
            driver = self.repository.add(payload)
            self.repository.save()
        except SQLAlchemyError:
            self.repository.rollback()
            logger.error("store_failure", operation="add_driver")
            raise

        record = DriverRead.model_validate(driver)
        if not self.cache.set(CacheKeys.driver(record.id), record, self._expires_at()):
            logger.warning("cache_populate_failed", key=CacheKeys.driver(record.id).name)
        self.cache.remove(CacheKeys.DRIVERS)

        logger.info("driver_added", driver_id=record.id)
        return record

    def remove_driver(self, driver_id: int) -> bool:
        """
        Delete a driver, then drop its cache entries.

        Returns:
            True if the driver was removed, False if it does not exist

        Raises:
            SQLAlchemyError: the delete or commit failed; the cache is untouched
        """
        driver = self.repository.find(driver_id)
        if driver is None:
            return False

        try:
            self.repository.remove(driver)
            self.repository.save()
        except SQLAlchemyError:
            self.repository.rollback()
            logger.error("store_failure", operation="remove_driver", driver_id=driver_id)
            raise

        self.cache.remove(CacheKeys.driver(driver_id))
        self.cache.remove(CacheKeys.DRIVERS)

        logger.info("driver_removed", driver_id=driver_id)
        return True

    def _load_all(self) -> list[DriverRead]:
        return [DriverRead.model_validate(d) for d in self.repository.list_all()]

    def _load_one(self, driver_id: int) -> DriverRead | None:
        driver = self.repository.find(driver_id)
        return DriverRead.model_validate(driver) if driver is not None else None


__all__ = ["DriverService", "DEFAULT_TTL"]
