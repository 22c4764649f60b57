"""Schedule service - Due schedules and completion tracking"""

import logging
from datetime import timedelta

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import PatientSchedule, ScheduleHistory
from ...scheduling import (
    calculate_next_due_date,
    completion_rate,
    days_until_due,
    format_schedule_status,
    today,
)
from .repository import ScheduleRepository
from .schemas import (
    DueSchedule,
    DueScheduleWithDays,
    HistoryEntry,
    SchedulePatient,
    ScheduleItem,
    ScheduleStats,
    ScheduleUpdate,
)

logger = logging.getLogger(__name__)

MAX_UPCOMING_DAYS = 365


def to_due_schedule(schedule: PatientSchedule) -> DueSchedule:
    return DueSchedule(
        scheduleId=schedule.id,
        scheduledDate=schedule.next_due_date,
        patient=SchedulePatient(
            id=schedule.patient.id,
            name=schedule.patient.name,
            patientNumber=schedule.patient.patient_number,
        ),
        item=ScheduleItem(id=schedule.item.id, name=schedule.item.name, type=schedule.item.type),
    )


def to_due_schedule_with_days(schedule: PatientSchedule, reference) -> DueScheduleWithDays:
    days = days_until_due(schedule.next_due_date, reference)
    return DueScheduleWithDays(
        **to_due_schedule(schedule).model_dump(),
        daysUntilDue=days,
        status=format_schedule_status(days)["status"],
    )


def to_history_entry(entry: ScheduleHistory) -> HistoryEntry:
    return HistoryEntry(
        id=entry.id,
        scheduledDate=entry.scheduled_date,
        completedDate=entry.completed_date,
        actualCompletionDate=entry.actual_completion_date,
        status=entry.status,
        notes=entry.notes,
        createdAt=entry.created_at,
    )


def complete_history_entry(
    schedule: PatientSchedule, entry: ScheduleHistory, completed_on, actual_date=None
) -> None:
    """
    Mark an occurrence completed and move the schedule on by one period,
    counted from the date the care was actually given.

    An occurrence that is already completed does not move the schedule again.
    """
    already_completed = entry.status == "completed"

    entry.status = "completed"
    entry.completed_date = completed_on
    entry.actual_completion_date = actual_date or entry.actual_completion_date or completed_on

    if already_completed:
        return

    base_date = entry.actual_completion_date or entry.completed_date
    schedule.last_completed_date = base_date
    schedule.next_due_date = calculate_next_due_date(
        base_date, schedule.item.period_value, schedule.item.period_unit
    )
    # A new due date has not been acknowledged yet
    schedule.is_notified = False


class ScheduleService:
    """Service layer for schedule business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ScheduleRepository()

    def get_schedule(self, schedule_id: str) -> PatientSchedule:
        schedule = self.repo.get_schedule_by_id(self.db, schedule_id)
        if not schedule:
            raise HTTPException(status_code=404, detail="Schedule not found")
        return schedule

    def get_today_schedules(self) -> list[DueSchedule]:
        return [to_due_schedule(s) for s in self.repo.get_due_on(self.db, today())]

    def get_overdue_schedules(self) -> list[DueScheduleWithDays]:
        current = today()
        return [to_due_schedule_with_days(s, current) for s in self.repo.get_overdue(self.db, current)]

    def get_upcoming_schedules(self, days: int = 7) -> list[DueScheduleWithDays]:
        if days < 0 or days > MAX_UPCOMING_DAYS:
            raise HTTPException(
                status_code=400, detail=f"days must be between 0 and {MAX_UPCOMING_DAYS}"
            )
        current = today()
        schedules = self.repo.get_due_between(self.db, current, current + timedelta(days=days))
        return [to_due_schedule_with_days(s, current) for s in schedules]

    def get_schedule_history(self, schedule_id: str) -> list[HistoryEntry]:
        self.get_schedule(schedule_id)
        return [to_history_entry(h) for h in self.repo.get_history(self.db, schedule_id)]

    def update_schedule(self, data: ScheduleUpdate) -> dict:
        """
        Record the outcome of the occurrence at the schedule's current due date.

        The history row is created when missing. Completion and the due date
        recalculation are committed together.
        """
        schedule = self.get_schedule(data.scheduleId)
        scheduled_date = schedule.next_due_date

        entry = self.repo.get_history_entry(self.db, schedule.id, scheduled_date)
        if entry is None:
            entry = ScheduleHistory(scheduled_date=scheduled_date, status="pending")
            schedule.history.append(entry)
            self.db.add(entry)

        entry.notes = data.notes

        if data.isCompleted:
            complete_history_entry(schedule, entry, today(), data.actualCompletionDate)
            logger.info(
                f"Completed schedule {schedule.id} for {scheduled_date}, next due {schedule.next_due_date}"
            )
        else:
            entry.status = "pending"
            entry.completed_date = None
            entry.actual_completion_date = None
            logger.info(f"Reset schedule {schedule.id} occurrence {scheduled_date} to pending")

        self.db.commit()
        return {"success": True}

    def get_stats(self) -> ScheduleStats:
        current = today()

        # Occurrences for today: schedules still due today plus ones already completed today
        due_today = {s.id for s in self.repo.get_due_on(self.db, current)}
        history_today = self.repo.get_history_on(self.db, current)
        completed_today = {h.patient_schedule_id for h in history_today if h.status == "completed"}
        total = len(due_today | completed_today)

        return ScheduleStats(
            todayTotal=total,
            todayCompleted=len(completed_today),
            todayCompletionRate=completion_rate(len(completed_today), total),
            overdueCount=self.repo.count_overdue(self.db, current),
        )
