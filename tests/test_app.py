import pytest

from carecycle import config
from carecycle.cache import Cache
from carecycle.models import CareItem, Item
from carecycle.seed import DEFAULT_CARE_ITEMS, DEFAULT_ITEMS, seed_default_data


def test_root_and_health(client):
    assert client.get("/").json() == {"message": "CareCycle API is running"}
    assert client.get("/health").json() == {"status": "healthy"}


def test_connection_check(client):
    response = client.get("/api/test-connection")
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["database"] == "connected"
    # Only booleans about configuration, never the values
    assert set(body["config"].values()) <= {True, False}


def test_security_headers(client):
    response = client.get("/api/items")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert response.headers["Cache-Control"] == "no-store"
    assert "Strict-Transport-Security" not in response.headers

    assert "X-Frame-Options" not in client.get("/health").headers


def test_items_ordered_by_type_then_name(client, items):
    response = client.get("/api/items")
    assert response.status_code == 200
    rows = response.json()
    assert [(r["type"], r["name"]) for r in rows] == sorted((r["type"], r["name"]) for r in rows)
    assert {r["name"] for r in rows} == {name for name, *_ in DEFAULT_ITEMS}
    assert {"period_value", "period_unit", "is_active"} <= set(rows[0])


def test_inactive_items_are_hidden(client, db, items):
    items["뇌파검사"].is_active = False
    db.commit()
    names = [r["name"] for r in client.get("/api/items").json()]
    assert "뇌파검사" not in names


def test_seed_is_idempotent(db):
    assert seed_default_data(db) == {"items": len(DEFAULT_ITEMS), "care_items": len(DEFAULT_CARE_ITEMS)}
    assert seed_default_data(db) == {"items": 0, "care_items": 0}
    assert db.query(Item).count() == 5
    assert db.query(CareItem).count() == 12


class TestApiToken:
    @pytest.fixture(autouse=True)
    def token(self, monkeypatch):
        monkeypatch.setattr(config, "API_TOKEN", "s3cret")

    def test_missing_token(self, client):
        response = client.get("/api/items")
        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_wrong_token(self, client):
        response = client.get("/api/items", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid authentication token"

    def test_valid_token(self, client):
        response = client.get("/api/items", headers={"Authorization": "Bearer s3cret"})
        assert response.status_code == 200

    def test_public_endpoints_stay_open(self, client):
        assert client.get("/health").status_code == 200


class TestCacheFailsOpen:
    def test_disabled_cache_does_nothing(self):
        cache = Cache(enabled=False)
        assert cache.get("k") is None
        assert cache.set("k", 1) is False
        assert cache.delete_pattern("*") == 0

    def test_unreachable_redis_is_retried_later(self, monkeypatch):
        calls = []

        def broken_client():
            calls.append(1)
            raise ConnectionError("refused")

        monkeypatch.setattr("carecycle.cache.get_redis_client", broken_client)
        cache = Cache(enabled=True)

        assert cache.get("k") is None
        assert cache.set("k", {"a": 1}) is False
        # Second call falls inside the retry interval and does not reconnect
        assert len(calls) == 1

    def test_errors_from_redis_are_swallowed(self):
        class Exploding:
            def __getattr__(self, name):
                def fail(*args, **kwargs):
                    raise RuntimeError("redis down")

                return fail

        cache = Cache(enabled=True)
        cache.redis_client = Exploding()
        assert cache.get("k") is None
        assert cache.set("k", 1) is False
        assert cache.delete_pattern("dashboard:*") == 0
