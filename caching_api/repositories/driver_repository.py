"""Driver repository: the persistent store behind the driver cache."""

from caching_api.logging import get_logger
from caching_api.models import Driver
from caching_api.schemas import DriverCreate

from .base import BaseRepository

logger = get_logger("repository.driver")


class DriverRepository(BaseRepository[Driver]):
    """Repository for Driver operations."""

    model = Driver

    def list_all(self) -> list[Driver]:
        """All drivers, ordered by ID."""
        return self.get_all()

    def find(self, driver_id: int) -> Driver | None:
        """Get a driver by ID, or None if it does not exist."""
        return self.get_by_id(driver_id)

    def add(self, payload: DriverCreate) -> Driver:
        """Stage a new driver. The ID is assigned on flush, the row is durable after save()."""
        driver = self.create(**payload.model_dump())
        logger.debug("driver_staged", driver_id=driver.id)
        return driver

    def remove(self, driver: Driver) -> None:
        """Stage removal of a loaded driver."""
        self.delete(driver)
