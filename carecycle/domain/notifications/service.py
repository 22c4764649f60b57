"""Notification service - Upcoming schedules as read/unread notifications"""

import logging
from collections import Counter
from datetime import date, timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import ITEM_TYPES, PatientSchedule
from ...scheduling import days_until_due, is_overdue, today
from .repository import NotificationRepository
from .schemas import (
    MarkAllRead,
    Notification,
    NotificationItem,
    NotificationPatient,
    NotificationStats,
)

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_DAYS = 3
MAX_WINDOW_DAYS = 365
EXPIRED_AFTER_DAYS = 7
PRIORITIES = ("urgent", "high", "medium", "low")


def notification_priority(days: int) -> str:
    if days < 0:
        return "urgent"
    if days == 0:
        return "high"
    if days <= 2:
        return "medium"
    return "low"


def notification_status(is_notified: bool, days: int) -> str:
    if is_notified:
        return "read"
    if days < -EXPIRED_AFTER_DAYS:
        return "expired"
    return "pending"


def format_due_date(days: int) -> str:
    """오늘, 내일, 모레, then 'N일 지연' or 'N일 후'"""
    if days == 0:
        return "오늘"
    if days == 1:
        return "내일"
    if days == 2:
        return "모레"
    if days < 0:
        return f"{abs(days)}일 지연"
    return f"{days}일 후"


def to_notification(schedule: PatientSchedule, reference: date) -> Notification:
    days = days_until_due(schedule.next_due_date, reference)
    patient = schedule.patient
    item = schedule.item
    return Notification(
        id=schedule.id,
        patientId=schedule.patient_id,
        itemId=schedule.item_id,
        nextDueDate=schedule.next_due_date,
        isNotified=schedule.is_notified,
        isActive=schedule.is_active,
        createdAt=schedule.created_at,
        updatedAt=schedule.updated_at,
        patient=NotificationPatient(id=patient.id, name=patient.name, patientNumber=patient.patient_number),
        item=NotificationItem(
            id=item.id,
            name=item.name,
            type=item.type,
            periodValue=item.period_value,
            periodUnit=item.period_unit,
        ),
        daysUntilDue=days,
        priority=notification_priority(days),
        status=notification_status(schedule.is_notified, days),
        formattedDueDate=format_due_date(days),
        isOverdue=is_overdue(schedule.next_due_date, reference),
        isToday=days == 0,
        isTomorrow=days == 1,
    )


class NotificationService:
    """Service layer for notifications"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = NotificationRepository()

    def get_notifications(
        self,
        patient_id: Optional[str] = None,
        unread: Optional[bool] = None,
        days: int = DEFAULT_WINDOW_DAYS,
        past_days: int = 0,
    ) -> list[Notification]:
        """
        Active schedules due from `past_days` ago up to `days` ahead.

        With the default past_days=0 the window starts today, so overdue
        schedules only show up when the caller asks to look back.
        """
        for name, value in (("days", days), ("pastDays", past_days)):
            if value < 0 or value > MAX_WINDOW_DAYS:
                raise HTTPException(
                    status_code=400, detail=f"{name} must be between 0 and {MAX_WINDOW_DAYS}"
                )

        current = today()
        schedules = self.repo.get_due_schedules(
            self.db,
            current - timedelta(days=past_days),
            current + timedelta(days=days),
            patient_id=patient_id,
            unread=unread,
        )
        return [to_notification(s, current) for s in schedules]

    def _get_schedule(self, notification_id: str) -> PatientSchedule:
        schedule = self.repo.get_schedule(self.db, notification_id)
        if not schedule:
            raise HTTPException(status_code=404, detail="Notification not found")
        return schedule

    def mark_as_read(self, notification_id: str) -> dict:
        schedule = self._get_schedule(notification_id)
        schedule.is_notified = True
        self.db.commit()
        return {"success": True}

    def mark_all_as_read(self, data: MarkAllRead) -> dict:
        if not data.ids:
            return {"success": True, "updated": 0}

        schedules = self.repo.get_schedules(self.db, data.ids)
        for schedule in schedules:
            schedule.is_notified = True
        self.db.commit()

        logger.info(f"Marked {len(schedules)} notification(s) as read")
        return {"success": True, "updated": len(schedules)}

    def dismiss(self, notification_id: str) -> dict:
        """Dismissing deactivates the underlying schedule"""
        schedule = self._get_schedule(notification_id)
        schedule.is_active = False
        self.db.commit()
        logger.info(f"Dismissed notification {notification_id}")
        return {"success": True}

    def get_stats(self, days: int = DEFAULT_WINDOW_DAYS, past_days: int = 0) -> NotificationStats:
        notifications = self.get_notifications(days=days, past_days=past_days)

        by_type = Counter(n.item.type for n in notifications)
        by_priority = Counter(n.priority for n in notifications)

        return NotificationStats(
            total=len(notifications),
            unread=sum(1 for n in notifications if not n.isNotified),
            today=sum(1 for n in notifications if n.isToday),
            upcoming=sum(1 for n in notifications if n.daysUntilDue > 0),
            overdue=sum(1 for n in notifications if n.isOverdue),
            byType={t: by_type.get(t, 0) for t in ITEM_TYPES},
            byPriority={p: by_priority.get(p, 0) for p in PRIORITIES},
        )
