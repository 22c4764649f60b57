import os

# Configure before the application modules read their settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["CACHE_ENABLED"] = "false"
os.environ["SEED_DEFAULT_DATA"] = "false"
os.environ["DB_LOG_SLOW_QUERIES"] = "false"
os.environ["APP_TIMEZONE"] = "UTC"
os.environ.pop("API_TOKEN", None)

from datetime import timedelta  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from carecycle.database import Base, SessionLocal, engine, get_db  # noqa: E402
from carecycle.main import app  # noqa: E402
from carecycle.models import CareItem, Item  # noqa: E402
from carecycle.scheduling import today  # noqa: E402
from carecycle.seed import seed_default_data  # noqa: E402


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def items(db):
    """Default catalog, keyed by item name"""
    seed_default_data(db)
    return {item.name: item for item in db.query(Item).all()}


@pytest.fixture
def care_items(db):
    seed_default_data(db)
    return {c.name: c for c in db.query(CareItem).all()}


@pytest.fixture
def register(client, items):
    """Register a patient through the API. first_date is an offset in days from today."""

    def _register(number="P-001", name="김환자", item_names=("4주 주사",), first_date=0, **extra):
        first = today() + timedelta(days=first_date)
        payload = {
            "patientNumber": number,
            "name": name,
            "schedules": [
                {"itemId": items[item_name].id, "firstDate": first.isoformat(), **extra}
                for item_name in item_names
            ],
        }
        response = client.post("/api/patients", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["patient_id"]

    return _register


class FakeRedis:
    """In-memory stand-in for the few redis commands the cache and publisher use"""

    def __init__(self):
        self.store = {}
        self.published = []

    def get(self, key):
        return self.store.get(key)

    def setex(self, key, ttl, value):
        self.store[key] = value

    def scan_iter(self, match="*"):
        import fnmatch

        return [k for k in list(self.store) if fnmatch.fnmatch(k, match)]

    def delete(self, *keys):
        removed = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                removed += 1
        return removed

    def publish(self, channel, message):
        self.published.append((channel, message))
        return 1


@pytest.fixture
def fake_redis(monkeypatch):
    from carecycle.cache import cache

    fake = FakeRedis()
    monkeypatch.setattr(cache, "enabled", True)
    monkeypatch.setattr(cache, "redis_client", fake)
    return fake
