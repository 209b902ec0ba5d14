from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from backend.app.dependencies import get_cache_store
from backend.app.main import create_app
from caching_api.config import Settings
from caching_api.db import db


@pytest.fixture
def test_app_client(test_engine, cache_store) -> Iterator[TestClient]:
    """App wired to the per-test SQLite engine and the fake Redis store."""
    db.reset()
    db.initialize(engine=test_engine)

    app = create_app(Settings(DATABASE_URL="sqlite://", CACHE_ENABLED=False))
    app.dependency_overrides[get_cache_store] = lambda: cache_store

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
    db.reset()
