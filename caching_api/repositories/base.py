"""Base repository class with common CRUD operations."""

from typing import Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.orm import Session

from caching_api.db import Base

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    """
    Base repository providing common CRUD operations.

    Mutations only flush; nothing is durable until save() commits.

    Usage:
        class DriverRepository(BaseRepository[Driver]):
            model = Driver

        repo = DriverRepository(session)
        driver = repo.get_by_id(1)
    """

    model: type[T]

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, id: int) -> T | None:
        """Get a single record by ID."""
        return self.session.get(self.model, id)

    def get_all(self) -> list[T]:
        """Get all records ordered by ID."""
        stmt = select(self.model).order_by(self.model.id)  # type: ignore[attr-defined]
        return list(self.session.scalars(stmt))

    def create(self, **kwargs) -> T:
        """Create a new record and flush so the store assigns its ID."""
        instance = self.model(**kwargs)
        self.session.add(instance)
        self.session.flush()
        return instance

    def delete(self, instance: T) -> None:
        """Delete a loaded record."""
        self.session.delete(instance)
        self.session.flush()

    def save(self) -> None:
        """Commit pending changes."""
        self.session.commit()

    def rollback(self) -> None:
        """Discard pending changes."""
        self.session.rollback()
