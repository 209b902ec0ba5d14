"""
Database Management Layer.

Provides a DatabaseManager for:
- Connection pooling (PostgreSQL) / StaticPool (SQLite)
- Session management with context managers
- Table creation for the drivers schema

Usage:
    from caching_api.db import db, get_db, Base

    db.initialize()
    with db.session() as session:
        drivers = session.query(Driver).all()
"""

import time
from collections.abc import Generator
from contextlib import contextmanager

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from .config import get_settings
from .logging import get_logger

logger = get_logger("database")


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all models."""

    pass


class DatabaseManager:
    """
    Database manager owning the engine and session factory.

    The app factory calls initialize() once at startup; tests can hand in
    an already-built engine instead of a URL.
    """

    def __init__(self):
        self.engine: Engine | None = None
        self.SessionLocal: sessionmaker[Session] | None = None

    def initialize(self, database_url: str | None = None, engine: Engine | None = None) -> None:
        """
        Initialize database connection. Call once at app startup.

        Args:
            database_url: Optional override. Uses settings.database_url if not provided.
            engine: Optional pre-built engine, takes precedence over the URL.
        """
        if self.is_initialized:
            return

        if engine is None:
            engine = self._create_engine(database_url or get_settings().database_url)

        self.engine = engine
        self.SessionLocal = sessionmaker(
            bind=self.engine,
            autoflush=False,
            autocommit=False,
            expire_on_commit=False,
        )
        logger.info("database_initialized", dialect=self.engine.dialect.name)

    @staticmethod
    def _create_engine(url: str) -> Engine:
        settings = get_settings()

        if url.startswith("sqlite"):
            return create_engine(
                url,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
                echo=settings.debug,
            )

        return create_engine(
            url,
            poolclass=QueuePool,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            echo=settings.debug,
        )

    def create_all_tables(self) -> None:
        """Create all tables defined by models."""
        # Register models on Base.metadata before create_all
        from . import models  # noqa: F401

        Base.metadata.create_all(bind=self._require_engine())

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """
        Context manager for database sessions with auto-commit/rollback.

        Usage:
            with db.session() as session:
                driver = session.get(Driver, 1)
        """
        session = self.get_session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def get_session(self) -> Session:
        """
        Get session for manual management. Prefer session() context manager.
        Caller is responsible for commit/rollback/close.
        """
        if self.SessionLocal is None:
            raise RuntimeError("DatabaseManager not initialized. Call initialize() first.")
        return self.SessionLocal()

    @property
    def is_initialized(self) -> bool:
        """Check if database manager is initialized."""
        return self.engine is not None

    def health_check(self) -> dict:
        """
        Perform database health check.

        Returns:
            dict with 'healthy' (bool), 'latency_ms' (float), and 'error' (str or None)
        """
        if not self.is_initialized:
            return {"healthy": False, "latency_ms": 0, "error": "Database not initialized"}

        start = time.perf_counter()
        try:
            with self._require_engine().connect() as conn:
                conn.execute(text("SELECT 1"))
            latency = (time.perf_counter() - start) * 1000
            return {"healthy": True, "latency_ms": round(latency, 2), "error": None}
        except Exception as e:
            latency = (time.perf_counter() - start) * 1000
            return {"healthy": False, "latency_ms": round(latency, 2), "error": str(e)}

    def reset(self) -> None:
        """Dispose the engine and return to the uninitialized state."""
        if self.engine is not None:
            self.engine.dispose()
        self.engine = None
        self.SessionLocal = None

    def _require_engine(self) -> Engine:
        if self.engine is None:
            raise RuntimeError("DatabaseManager not initialized. Call initialize() first.")
        return self.engine


# Process-wide manager used by the app; tests may build their own
db = DatabaseManager()


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency for database sessions.

    Usage:
        @app.get("/drivers")
        def list_drivers(db: Session = Depends(get_db)):
            return db.query(Driver).all()
    """
    with db.session() as session:
        yield session


__all__ = ["Base", "DatabaseManager", "db", "get_db"]
