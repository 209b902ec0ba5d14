"""Domain services."""

from .driver_service import DriverService

__all__ = ["DriverService"]
