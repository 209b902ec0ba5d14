"""
SQLAlchemy models for the drivers caching API.

Usage:
    from caching_api.models import Driver
"""

from .base import Base
from .driver import Driver

__all__ = [
    "Base",
    "Driver",
]
