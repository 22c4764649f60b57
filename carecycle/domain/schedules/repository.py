"""Schedule repository - Database operations for patient schedules and their history"""

from datetime import date
from typing import Optional

from sqlalchemy import and_, exists
from sqlalchemy.orm import Session, joinedload

from ...models import PatientSchedule, ScheduleHistory


def completed_at_due_date():
    """True when the history row at the schedule's current due date is completed"""
    return exists().where(
        and_(
            ScheduleHistory.patient_schedule_id == PatientSchedule.id,
            ScheduleHistory.scheduled_date == PatientSchedule.next_due_date,
            ScheduleHistory.status == "completed",
        )
    )


def _active_schedules(db: Session):
    return (
        db.query(PatientSchedule)
        .options(joinedload(PatientSchedule.patient), joinedload(PatientSchedule.item))
        .filter(PatientSchedule.is_active.is_(True))
    )


class ScheduleRepository:
    """Repository for schedule database operations"""

    @staticmethod
    def get_schedule_by_id(db: Session, schedule_id: str) -> Optional[PatientSchedule]:
        return (
            db.query(PatientSchedule)
            .options(joinedload(PatientSchedule.item))
            .filter(PatientSchedule.id == schedule_id)
            .first()
        )

    @staticmethod
    def get_due_on(db: Session, day: date) -> list[PatientSchedule]:
        return (
            _active_schedules(db)
            .filter(PatientSchedule.next_due_date == day)
            .order_by(PatientSchedule.created_at)
            .all()
        )

    @staticmethod
    def get_overdue(db: Session, today: date) -> list[PatientSchedule]:
        """Active schedules past due whose due occurrence is not completed, oldest first"""
        return (
            _active_schedules(db)
            .filter(PatientSchedule.next_due_date < today, ~completed_at_due_date())
            .order_by(PatientSchedule.next_due_date)
            .all()
        )

    @staticmethod
    def count_overdue(db: Session, today: date) -> int:
        return (
            db.query(PatientSchedule)
            .filter(
                PatientSchedule.is_active.is_(True),
                PatientSchedule.next_due_date < today,
                ~completed_at_due_date(),
            )
            .count()
        )

    @staticmethod
    def get_due_between(
        db: Session, start: date, end: Optional[date] = None, limit: Optional[int] = None
    ) -> list[PatientSchedule]:
        """Active, not yet completed schedules due in [start, end] (no upper bound when end is None)"""
        query = _active_schedules(db).filter(
            PatientSchedule.next_due_date >= start, ~completed_at_due_date()
        )
        if end is not None:
            query = query.filter(PatientSchedule.next_due_date <= end)
        query = query.order_by(PatientSchedule.next_due_date, PatientSchedule.created_at)
        if limit:
            query = query.limit(limit)
        return query.all()

    @staticmethod
    def get_history_entry(
        db: Session, schedule_id: str, scheduled_date: date
    ) -> Optional[ScheduleHistory]:
        return (
            db.query(ScheduleHistory)
            .filter(
                ScheduleHistory.patient_schedule_id == schedule_id,
                ScheduleHistory.scheduled_date == scheduled_date,
            )
            .first()
        )

    @staticmethod
    def get_history(db: Session, schedule_id: str) -> list[ScheduleHistory]:
        return (
            db.query(ScheduleHistory)
            .filter(ScheduleHistory.patient_schedule_id == schedule_id)
            .order_by(ScheduleHistory.scheduled_date.desc(), ScheduleHistory.created_at.desc())
            .all()
        )

    @staticmethod
    def get_history_on(db: Session, day: date) -> list[ScheduleHistory]:
        """History rows of active schedules scheduled on day"""
        return (
            db.query(ScheduleHistory)
            .join(ScheduleHistory.schedule)
            .filter(ScheduleHistory.scheduled_date == day, PatientSchedule.is_active.is_(True))
            .all()
        )
