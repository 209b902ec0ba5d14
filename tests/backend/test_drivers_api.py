from sqlalchemy.exc import OperationalError

from caching_api.cache import CacheKeys
from caching_api.repositories import DriverRepository

API = "/api/v1/drivers"


def _create(client, **payload):
    resp = client.post(API, json=payload)
    assert resp.status_code == 201
    return resp.json()


def test_create_driver_returns_assigned_id(test_app_client, cache_store):
    data = _create(test_app_client, name="Alice", team="Red", number=7)

    assert isinstance(data["id"], int)
    assert data["name"] == "Alice"
    assert cache_store.get(CacheKeys.driver(data["id"])).name == "Alice"


def test_list_drivers_includes_new_driver(test_app_client):
    assert test_app_client.get(API).json() == []

    created = _create(test_app_client, name="Alice")
    resp = test_app_client.get(API)

    assert resp.status_code == 200
    assert [d["id"] for d in resp.json()] == [created["id"]]


def test_get_driver(test_app_client):
    created = _create(test_app_client, name="Alice", number=44)

    resp = test_app_client.get(f"{API}/{created['id']}")

    assert resp.status_code == 200
    assert resp.json()["number"] == 44


def test_cache_hit_and_store_read_agree(test_app_client, cache_store):
    created = _create(test_app_client, name="Alice")

    cached = test_app_client.get(f"{API}/{created['id']}").json()
    cache_store.remove(CacheKeys.driver(created["id"]))
    from_store = test_app_client.get(f"{API}/{created['id']}").json()
    listed = test_app_client.get(API).json()

    assert cached == from_store == created
    assert listed == [created]
    assert created["created_at"].endswith("Z")


def test_get_missing_driver_returns_404(test_app_client):
    resp = test_app_client.get(f"{API}/999")

    assert resp.status_code == 404
    assert resp.json() == {"detail": "Driver not found", "status_code": 404}


def test_delete_driver_then_404(test_app_client, cache_store):
    created = _create(test_app_client, name="Alice")

    resp = test_app_client.delete(f"{API}/{created['id']}")
    assert resp.status_code == 204
    assert resp.content == b""
    assert cache_store.get(CacheKeys.driver(created["id"])) is None

    assert test_app_client.delete(f"{API}/{created['id']}").status_code == 404
    assert test_app_client.get(API).json() == []


def test_invalid_payload_returns_422(test_app_client):
    resp = test_app_client.post(API, json={"name": "", "number": 120})

    assert resp.status_code == 422
    body = resp.json()
    assert body["detail"] == "Validation error"
    assert {tuple(e["loc"]) for e in body["errors"]} == {("body", "name"), ("body", "number")}


def test_store_failure_returns_503(test_app_client, cache_store, monkeypatch):
    def db_down(self):
        raise OperationalError("COMMIT", {}, Exception("server closed the connection"))

    monkeypatch.setattr(DriverRepository, "save", db_down)

    resp = test_app_client.post(API, json={"name": "Alice"})

    assert resp.status_code == 503
    assert resp.json() == {"detail": "Storage unavailable", "status_code": 503}
    assert cache_store.get(CacheKeys.DRIVERS) is None


def test_request_id_is_echoed(test_app_client):
    resp = test_app_client.get(API, headers={"X-Request-ID": "abc-123"})

    assert resp.headers["x-request-id"] == "abc-123"


def test_health_endpoints(test_app_client):
    assert test_app_client.get("/health").json() == {"status": "ok"}

    resp = test_app_client.get("/health/ready")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ready", "checks": {"database": True, "cache": False}}


def test_readiness_fails_without_database(test_app_client):
    from caching_api.db import db

    db.reset()

    resp = test_app_client.get("/health/ready")

    assert resp.status_code == 503
    assert resp.json()["status"] == "not_ready"


def test_detailed_health_hidden_outside_debug(test_app_client):
    resp = test_app_client.get("/health/detailed")

    assert resp.json() == {"error": "Detailed health info only available in debug mode"}


def test_malformed_request_id_is_replaced(test_app_client):
    resp = test_app_client.get(API, headers={"X-Request-ID": "bad id with spaces"})

    assert resp.headers["x-request-id"] != "bad id with spaces"
    assert len(resp.headers["x-request-id"]) == 36
