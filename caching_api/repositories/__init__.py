"""
Repository pattern implementations for data access.

Repositories wrap a SQLAlchemy session and leave the commit to the
caller through save().

Usage:
    from caching_api.repositories import DriverRepository
    from caching_api.db import db

    with db.session() as session:
        repo = DriverRepository(session)
        drivers = repo.list_all()
"""

from .base import BaseRepository
from .driver_repository import DriverRepository

__all__ = [
    "BaseRepository",
    "DriverRepository",
]
