from datetime import timedelta

from carecycle.models import PatientSchedule, ScheduleHistory
from carecycle.scheduling import today


def _schedule(db):
    return db.query(PatientSchedule).one()


def test_today_lists_schedules_due_today(client, register):
    register(number="P-1", name="오늘환자", first_date=-28)
    register(number="P-2", name="다음환자", first_date=-20)

    response = client.get("/api/schedule/today")
    assert response.status_code == 200
    schedules = response.json()
    assert len(schedules) == 1
    entry = schedules[0]
    assert entry["scheduledDate"] == today().isoformat()
    assert entry["patient"]["name"] == "오늘환자"
    assert entry["patient"]["patientNumber"] == "P-1"
    assert entry["item"]["name"] == "4주 주사"
    assert entry["item"]["type"] == "injection"


def test_completing_moves_the_schedule_forward(client, db, register):
    register(first_date=-28)
    schedule = _schedule(db)
    due = schedule.next_due_date

    response = client.post(
        "/api/schedule/update",
        json={"scheduleId": schedule.id, "isCompleted": True, "notes": "  완료  "},
    )
    assert response.status_code == 200
    assert response.json() == {"success": True}

    db.refresh(schedule)
    assert schedule.last_completed_date == today()
    assert schedule.next_due_date == today() + timedelta(weeks=4)

    entry = db.query(ScheduleHistory).filter_by(scheduled_date=due).one()
    assert entry.status == "completed"
    assert entry.completed_date == today()
    assert entry.actual_completion_date == today()
    assert entry.notes == "완료"


def test_actual_completion_date_is_the_base_for_the_next_due_date(client, db, register):
    register(first_date=-28)
    schedule = _schedule(db)
    performed = today() - timedelta(days=3)

    client.post(
        "/api/schedule/update",
        json={
            "scheduleId": schedule.id,
            "isCompleted": True,
            "actualCompletionDate": performed.isoformat(),
        },
    )

    db.refresh(schedule)
    assert schedule.last_completed_date == performed
    assert schedule.next_due_date == performed + timedelta(weeks=4)


def test_already_completed_occurrence_is_not_recalculated_twice(client, db, register):
    register(first_date=-28)
    schedule = _schedule(db)
    due = schedule.next_due_date
    db.add(
        ScheduleHistory(
            patient_schedule_id=schedule.id,
            scheduled_date=due,
            status="completed",
            completed_date=due,
            actual_completion_date=due,
        )
    )
    db.commit()

    client.post("/api/schedule/update", json={"scheduleId": schedule.id, "isCompleted": True})

    db.refresh(schedule)
    assert schedule.next_due_date == due
    assert db.query(ScheduleHistory).filter_by(scheduled_date=due).count() == 1


def test_uncompleting_resets_the_occurrence(client, db, register):
    register(first_date=-28)
    schedule = _schedule(db)
    due = schedule.next_due_date

    client.post("/api/schedule/update", json={"scheduleId": schedule.id, "isCompleted": False})

    db.refresh(schedule)
    assert schedule.next_due_date == due
    entry = db.query(ScheduleHistory).filter_by(scheduled_date=due).one()
    assert entry.status == "pending"
    assert entry.completed_date is None
    assert entry.actual_completion_date is None


def test_update_without_notes_clears_them(client, db, register):
    register(first_date=-28)
    schedule = _schedule(db)
    due = schedule.next_due_date

    client.post(
        "/api/schedule/update",
        json={"scheduleId": schedule.id, "isCompleted": False, "notes": "연기"},
    )
    entry = db.query(ScheduleHistory).filter_by(scheduled_date=due).one()
    assert entry.notes == "연기"

    client.post("/api/schedule/update", json={"scheduleId": schedule.id, "isCompleted": False})
    db.refresh(entry)
    assert entry.notes is None


def test_update_unknown_schedule(client, items):
    response = client.post("/api/schedule/update", json={"scheduleId": "nope", "isCompleted": True})
    assert response.status_code == 404


def test_overdue_and_upcoming(client, register):
    register(number="LATE", first_date=-60)  # due 32 days ago
    register(number="SOON", first_date=-25)  # due in 3 days
    register(number="LATER", first_date=-10)  # due in 18 days

    overdue = client.get("/api/schedule/overdue").json()
    assert [s["patient"]["patientNumber"] for s in overdue] == ["LATE"]
    assert overdue[0]["daysUntilDue"] == -32
    assert overdue[0]["status"] == "overdue"

    upcoming = client.get("/api/schedule/upcoming").json()
    assert [s["patient"]["patientNumber"] for s in upcoming] == ["SOON"]
    assert upcoming[0]["daysUntilDue"] == 3

    wider = client.get("/api/schedule/upcoming", params={"days": 30}).json()
    assert [s["patient"]["patientNumber"] for s in wider] == ["SOON", "LATER"]

    assert client.get("/api/schedule/upcoming", params={"days": -1}).status_code == 400


def test_history_newest_first(client, db, register):
    register(first_date=-28)
    schedule = _schedule(db)
    client.post("/api/schedule/update", json={"scheduleId": schedule.id, "isCompleted": True})

    response = client.get(f"/api/schedule/{schedule.id}/history")
    assert response.status_code == 200
    history = response.json()
    assert [h["status"] for h in history] == ["completed", "pending"]
    assert history[0]["scheduledDate"] == today().isoformat()

    assert client.get("/api/schedule/missing/history").status_code == 404


def test_schedule_stats(client, db, register):
    register(number="P-1", first_date=-28)
    register(number="P-2", first_date=-28, item_names=("심리검사",))  # due later
    register(number="P-3", first_date=-56)  # overdue by 28 days
    register(number="P-4", first_date=-28, item_names=("12주 주사",))  # due later

    # One of the two due today gets completed
    register(number="P-5", first_date=-28)
    done = (
        db.query(PatientSchedule)
        .filter(PatientSchedule.next_due_date == today())
        .order_by(PatientSchedule.created_at)
        .first()
    )
    client.post("/api/schedule/update", json={"scheduleId": done.id, "isCompleted": True})

    stats = client.get("/api/schedule/stats").json()
    assert stats == {
        "todayTotal": 2,
        "todayCompleted": 1,
        "todayCompletionRate": 50.0,
        "overdueCount": 1,
    }
