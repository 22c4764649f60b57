import pytest

from carecycle.domain.notifications.service import (
    format_due_date,
    notification_priority,
    notification_status,
)
from carecycle.models import PatientSchedule


@pytest.mark.parametrize(
    "days,priority",
    [(-1, "urgent"), (0, "high"), (1, "medium"), (2, "medium"), (3, "low")],
)
def test_priority(days, priority):
    assert notification_priority(days) == priority


def test_status():
    assert notification_status(True, -30) == "read"
    assert notification_status(False, -8) == "expired"
    assert notification_status(False, -7) == "pending"
    assert notification_status(False, 3) == "pending"


@pytest.mark.parametrize(
    "days,label",
    [(0, "오늘"), (1, "내일"), (2, "모레"), (-3, "3일 지연"), (5, "5일 후")],
)
def test_format_due_date(days, label):
    assert format_due_date(days) == label


@pytest.fixture
def due_soon(register):
    """Patients due today, tomorrow, in 3 days, in 10 days and 5 days ago"""
    return {
        "today": register(number="D0", first_date=-28),
        "tomorrow": register(number="D1", first_date=-27),
        "three": register(number="D3", first_date=-25, item_names=("12주 주사",), periodValue=4, periodUnit="weeks"),
        "ten": register(number="D10", first_date=-18),
        "late": register(number="L5", first_date=-33),
    }


def test_default_window_is_today_plus_three_days(client, due_soon):
    notifications = client.get("/api/notifications").json()

    assert [n["patient"]["patientNumber"] for n in notifications] == ["D0", "D1", "D3"]
    first, second, third = notifications
    assert first["isToday"] and first["priority"] == "high" and first["formattedDueDate"] == "오늘"
    assert second["isTomorrow"] and second["priority"] == "medium"
    assert third["daysUntilDue"] == 3 and third["priority"] == "low"
    assert third["item"]["name"] == "12주 주사"
    assert all(n["status"] == "pending" and not n["isNotified"] for n in notifications)


def test_past_days_includes_overdue(client, due_soon):
    notifications = client.get("/api/notifications", params={"pastDays": 7}).json()
    late = notifications[0]
    assert late["patient"]["patientNumber"] == "L5"
    assert late["isOverdue"] is True
    assert late["priority"] == "urgent"
    assert late["formattedDueDate"] == "5일 지연"


def test_filters(client, due_soon):
    patient_id = due_soon["tomorrow"]
    by_patient = client.get("/api/notifications", params={"patientId": patient_id}).json()
    assert [n["patientId"] for n in by_patient] == [patient_id]

    client.post(f"/api/notifications/{by_patient[0]['id']}/read")
    unread = client.get("/api/notifications", params={"unread": "true"}).json()
    read = client.get("/api/notifications", params={"unread": "false"}).json()
    assert len(unread) == 2
    assert [n["status"] for n in read] == ["read"]


def test_mark_all_read(client, db, due_soon):
    ids = [n["id"] for n in client.get("/api/notifications").json()]

    response = client.post("/api/notifications/read-all", json={"ids": ids})
    assert response.json() == {"success": True, "updated": 3}
    assert client.get("/api/notifications", params={"unread": "true"}).json() == []

    assert client.post("/api/notifications/read-all", json={"ids": []}).json()["updated"] == 0


def test_dismiss_deactivates_schedule(client, db, due_soon):
    notification = client.get("/api/notifications").json()[0]

    assert client.post(f"/api/notifications/{notification['id']}/dismiss").status_code == 200
    assert db.get(PatientSchedule, notification["id"]).is_active is False
    assert len(client.get("/api/notifications").json()) == 2


def test_missing_notification(client, items):
    assert client.post("/api/notifications/missing/read").status_code == 404
    assert client.post("/api/notifications/missing/dismiss").status_code == 404


def test_stats(client, due_soon):
    stats = client.get("/api/notifications/stats", params={"pastDays": 7}).json()
    assert stats["total"] == 4
    assert stats["unread"] == 4
    assert stats["today"] == 1
    assert stats["upcoming"] == 2
    assert stats["overdue"] == 1
    assert stats["byType"] == {"test": 0, "injection": 4}
    assert stats["byPriority"] == {"urgent": 1, "high": 1, "medium": 1, "low": 1}


def test_window_is_validated(client, items):
    assert client.get("/api/notifications", params={"days": -1}).status_code == 400
