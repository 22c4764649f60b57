"""Dashboard repository - Aggregate queries over schedules and history"""

from datetime import date

from sqlalchemy import case, func
from sqlalchemy.orm import Session, joinedload

from ...models import Item, Patient, PatientSchedule, ScheduleHistory


class DashboardRepository:
    """Read-only aggregate queries for the dashboard"""

    @staticmethod
    def count_patients(db: Session) -> int:
        return db.query(func.count(Patient.id)).scalar() or 0

    @staticmethod
    def count_due_on(db: Session, day: date) -> int:
        return (
            db.query(func.count(PatientSchedule.id))
            .filter(PatientSchedule.is_active.is_(True), PatientSchedule.next_due_date == day)
            .scalar()
            or 0
        )

    @staticmethod
    def history_counts(db: Session, start: date, end: date) -> tuple[int, int]:
        """(completed, total) history rows scheduled in [start, end]"""
        completed, total = (
            db.query(
                func.sum(case((ScheduleHistory.status == "completed", 1), else_=0)),
                func.count(ScheduleHistory.id),
            )
            .filter(ScheduleHistory.scheduled_date >= start, ScheduleHistory.scheduled_date <= end)
            .one()
        )
        return int(completed or 0), int(total or 0)

    @staticmethod
    def recent_completed(db: Session, limit: int = 10) -> list[ScheduleHistory]:
        return (
            db.query(ScheduleHistory)
            .options(
                joinedload(ScheduleHistory.schedule).joinedload(PatientSchedule.patient),
                joinedload(ScheduleHistory.schedule).joinedload(PatientSchedule.item),
            )
            .filter(ScheduleHistory.status == "completed")
            .order_by(ScheduleHistory.completed_date.desc(), ScheduleHistory.updated_at.desc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def counts_by_item_type(db: Session, start: date) -> dict[str, int]:
        """History rows scheduled on or after start, per item type"""
        rows = (
            db.query(Item.type, func.count(ScheduleHistory.id))
            .join(PatientSchedule, ScheduleHistory.patient_schedule_id == PatientSchedule.id)
            .join(Item, PatientSchedule.item_id == Item.id)
            .filter(ScheduleHistory.scheduled_date >= start)
            .group_by(Item.type)
            .all()
        )
        return {item_type: count for item_type, count in rows}
