"""
Cache key management.

A CacheKey carries the type of the value stored under it, so every reader
and writer of a key agrees on the payload shape.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Generic, TypeVar

from pydantic import TypeAdapter

from caching_api.schemas import DriverRead

T = TypeVar("T")


@lru_cache(maxsize=None)
def _type_adapter(value_type: Any) -> TypeAdapter:
    return TypeAdapter(value_type)


@dataclass(frozen=True)
class CacheKey(Generic[T]):
    """A Redis key name bound to the type of its value."""

    name: str
    value_type: Any

    @property
    def adapter(self) -> TypeAdapter:
        """Pydantic adapter used to serialize and validate the value."""
        return _type_adapter(self.value_type)

    def __str__(self) -> str:
        return self.name


class CacheKeys:
    """
    Centralized cache key definitions.

    Examples:
        - drivers -> every driver, as list[DriverRead]
        - driver42 -> a single driver, as DriverRead
    """

    DRIVERS: CacheKey[list[DriverRead]] = CacheKey("drivers", list[DriverRead])

    @staticmethod
    def driver(driver_id: int) -> CacheKey[DriverRead]:
        """Cache key for a single driver record."""
        return CacheKey(f"driver{driver_id}", DriverRead)


__all__ = ["CacheKey", "CacheKeys"]
