"""Notification repository - Queries over patient schedules"""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import PatientSchedule


class NotificationRepository:
    """Repository for notification database operations"""

    @staticmethod
    def get_due_schedules(
        db: Session,
        start: date,
        end: date,
        patient_id: Optional[str] = None,
        unread: Optional[bool] = None,
    ) -> list[PatientSchedule]:
        """Active schedules due in [start, end], earliest first"""
        query = (
            db.query(PatientSchedule)
            .options(joinedload(PatientSchedule.patient), joinedload(PatientSchedule.item))
            .filter(
                PatientSchedule.is_active.is_(True),
                PatientSchedule.next_due_date >= start,
                PatientSchedule.next_due_date <= end,
            )
        )
        if patient_id:
            query = query.filter(PatientSchedule.patient_id == patient_id)
        if unread is not None:
            query = query.filter(PatientSchedule.is_notified.is_(not unread))
        return query.order_by(PatientSchedule.next_due_date, PatientSchedule.created_at).all()

    @staticmethod
    def get_schedule(db: Session, schedule_id: str) -> Optional[PatientSchedule]:
        return db.query(PatientSchedule).filter(PatientSchedule.id == schedule_id).first()

    @staticmethod
    def get_schedules(db: Session, schedule_ids: list[str]) -> list[PatientSchedule]:
        return db.query(PatientSchedule).filter(PatientSchedule.id.in_(schedule_ids)).all()
