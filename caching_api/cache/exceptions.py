"""
Cache error hierarchy.

CacheStore.load() raises these; the lenient CacheStore operations catch
them and degrade to a miss or a failed write.
"""


class CacheError(Exception):
    """Base class for cache-layer failures."""

    def __init__(self, message: str, key: str | None = None):
        super().__init__(message)
        self.key = key


class CacheUnavailableError(CacheError):
    """Redis is unreachable, timed out or rejected the command."""


class CacheDeserializationError(CacheError):
    """A cached payload does not validate as the key's value type."""


__all__ = ["CacheError", "CacheUnavailableError", "CacheDeserializationError"]
