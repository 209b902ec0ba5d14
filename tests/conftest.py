"""
Pytest fixtures for the drivers caching API tests.

The database is an in-memory SQLite engine created per test. Redis is
replaced by FakeRedis, an in-memory client that honours PSETEX expiry
against a FakeClock shared with the CacheStore under test.
"""

from datetime import datetime, timedelta, timezone

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from caching_api.cache import CacheStore
from caching_api.db import Base
from caching_api.repositories import DriverRepository
from caching_api.services import DriverService

import caching_api.models  # noqa: F401  registers tables on Base.metadata


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime | None = None):
        self.current = start or datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)


class FakeRedis:
    """
    In-memory stand-in for the redis.Redis commands CacheStore uses.

    Every command is appended to `commands` as (command, key) so tests can
    assert on cache round trips.
    """

    def __init__(self, clock: FakeClock):
        self.clock = clock
        self._data: dict[str, tuple[bytes, datetime]] = {}
        self.commands: list[tuple[str, str]] = []

    def _live(self, name: str) -> bytes | None:
        entry = self._data.get(name)
        if entry is None:
            return None
        value, expires_at = entry
        if self.clock.now() >= expires_at:
            del self._data[name]
            return None
        return value

    def get(self, name: str) -> bytes | None:
        self.commands.append(("get", name))
        return self._live(name)

    def psetex(self, name: str, time_ms: int, value: bytes) -> bool:
        self.commands.append(("psetex", name))
        if time_ms <= 0:
            raise ValueError("invalid expire time in 'psetex' command")
        self._data[name] = (value, self.clock.now() + timedelta(milliseconds=time_ms))
        return True

    def delete(self, *names: str) -> int:
        deleted = 0
        for name in names:
            self.commands.append(("delete", name))
            if self._live(name) is not None:
                del self._data[name]
                deleted += 1
        return deleted

    def ping(self) -> bool:
        return True

    def info(self, section: str | None = None) -> dict:
        return {"used_memory_human": "1K", "connected_clients": 1}

    def raw_set(self, name: str, value: bytes, ttl_seconds: float = 60) -> None:
        """Write bytes directly, bypassing CacheStore serialization."""
        self._data[name] = (value, self.clock.now() + timedelta(seconds=ttl_seconds))

    def keys(self) -> list[str]:
        return [name for name in list(self._data) if self._live(name) is not None]


class UnreachableRedis:
    """Client whose every command fails like a dropped connection."""

    def get(self, name):
        raise RedisConnectionError("Connection refused")

    def psetex(self, name, time_ms, value):
        raise RedisConnectionError("Connection refused")

    def delete(self, *names):
        raise RedisConnectionError("Connection refused")

    def ping(self):
        raise RedisConnectionError("Connection refused")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_redis(clock) -> FakeRedis:
    return FakeRedis(clock)


@pytest.fixture
def cache_store(fake_redis, clock) -> CacheStore:
    return CacheStore(fake_redis, clock=clock.now)


@pytest.fixture
def unreachable_store(clock) -> CacheStore:
    return CacheStore(UnreachableRedis(), clock=clock.now)


@pytest.fixture(scope="function")
def test_engine():
    """Fresh in-memory database for each test."""
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return sessionmaker(bind=test_engine, autoflush=False, autocommit=False, expire_on_commit=False)


@pytest.fixture
def test_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def driver_repository(test_session) -> DriverRepository:
    return DriverRepository(test_session)


@pytest.fixture
def driver_service(driver_repository, cache_store) -> DriverService:
    return DriverService(driver_repository, cache_store, ttl=timedelta(seconds=30))
