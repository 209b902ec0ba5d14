"""
Base model class for SQLAlchemy ORM.

Re-exports the Base class from the database module for convenience.
"""

from caching_api.db import Base

__all__ = ["Base"]
