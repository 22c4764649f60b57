import json
import re

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError, OperationalError

from carecycle import config
from carecycle.domain.care_items.service import CareItemService
from carecycle.errors import (
    create_error_response,
    generate_request_id,
    get_status_code_from_error,
    is_database_error,
    sanitize_error_message,
)
from carecycle.main import app
from carecycle.models import CareItem


@pytest.fixture
def production(monkeypatch):
    monkeypatch.setattr(config, "IS_DEVELOPMENT", False)
    monkeypatch.setattr(config, "IS_PRODUCTION", True)


@pytest.mark.parametrize(
    "message,safe",
    [
        ('duplicate key value violates unique constraint "patients_pkey"', "A record with this information already exists"),
        ("insert violates foreign key constraint", "Related data dependency error"),
        ("No rows returned", "Requested resource not found"),
        ("permission denied for table patients", "Permission denied"),
        ("statement timeout", "Request timeout"),
        ("could not connect to server", "Service temporarily unavailable"),
        ("something odd", "An unexpected error occurred"),
    ],
)
def test_sanitize_outside_development(production, message, safe):
    assert sanitize_error_message(Exception(message)) == safe


def test_sanitize_non_exception(production):
    assert sanitize_error_message("plain string") == "An unexpected error occurred"


def test_development_shows_raw_message(monkeypatch):
    monkeypatch.setattr(config, "IS_DEVELOPMENT", True)
    assert sanitize_error_message(Exception("column x does not exist")) == "column x does not exist"


@pytest.mark.parametrize(
    "message,status",
    [
        ("Patient not found", 404),
        ("Unauthorized access", 403),
        ("Invalid date", 400),
        ("Duplicate entry", 409),
        ("Timeout waiting", 408),
        ("Too many requests", 429),
        ("boom", 500),
    ],
)
def test_status_code_from_error(message, status):
    assert get_status_code_from_error(Exception(message)) == status


def test_is_database_error():
    assert is_database_error(OperationalError("SELECT 1", {}, Exception("gone")))
    assert is_database_error(Exception('relation "patients" does not exist'))
    assert not is_database_error(Exception("boom"))
    assert not is_database_error(None)


def test_request_id_format():
    assert re.fullmatch(r"req_\d+_[a-z0-9]{9}", generate_request_id())


def test_error_response_in_production(production):
    error = IntegrityError("INSERT", {}, Exception("duplicate key value violates unique constraint"))
    response = create_error_response(error, status_code=409, custom_message="Conflict")

    assert response.status_code == 409
    body = json.loads(response.body)
    assert body["error"] == "Conflict"
    assert body["message"] == "A record with this information already exists"
    assert body["requestId"].startswith("req_")


def test_error_response_outside_production(monkeypatch):
    monkeypatch.setattr(config, "IS_PRODUCTION", False)
    body = json.loads(create_error_response(Exception("x")).body)
    assert "requestId" not in body
    assert body["error"] == "Request failed"


class TestAppErrorHandlers:
    def test_integrity_error_is_a_conflict(self, client, db, monkeypatch):
        monkeypatch.setattr(CareItemService, "_ensure_unique", lambda self, *args, **kwargs: None)
        payload = {"name": "혈액검사", "type": "procedure", "interval_weeks": 4}
        assert client.post("/api/care-items", json=payload).status_code == 201

        response = client.post("/api/care-items", json=payload)

        assert response.status_code == 409
        assert response.json() == {
            "error": "Conflict with existing data",
            "message": "A record with this information already exists",
        }
        db.rollback()
        assert db.query(CareItem).count() == 1

    def test_database_error_status_is_mapped(self, client, monkeypatch):
        def timed_out(self, item_type=None):
            raise OperationalError("SELECT 1", {}, Exception("statement timeout"))

        monkeypatch.setattr(CareItemService, "get_care_items", timed_out)

        response = client.get("/api/care-items")

        assert response.status_code == 408
        assert response.json() == {"error": "Database error", "message": "Request timeout"}

    def test_unexpected_error_in_production(self, client, production, monkeypatch):
        def boom(self, item_type=None):
            raise RuntimeError("internal detail /srv/app.py")

        monkeypatch.setattr(CareItemService, "get_care_items", boom)

        response = TestClient(app, raise_server_exceptions=False).get("/api/care-items")

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Internal server error"
        assert body["message"] == "An unexpected error occurred"
        assert body["requestId"].startswith("req_")
        assert "/srv/app.py" not in response.text
