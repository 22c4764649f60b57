"""Notification router - FastAPI endpoints for due-date notifications"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import require_api_token
from ...database import get_db
from .schemas import MarkAllRead, Notification, NotificationStats
from .service import DEFAULT_WINDOW_DAYS, NotificationService

router = APIRouter(
    prefix="/api/notifications", tags=["Notifications"], dependencies=[Depends(require_api_token)]
)


def get_notification_service(db: Session = Depends(get_db)) -> NotificationService:
    """Dependency injection for NotificationService"""
    return NotificationService(db)


@router.get("", response_model=list[Notification])
async def get_notifications(
    patientId: Optional[str] = Query(None),
    unread: Optional[bool] = Query(None, description="true for unread only, false for read only"),
    days: int = Query(DEFAULT_WINDOW_DAYS, description="Days ahead of today"),
    pastDays: int = Query(0, description="Days before today (overdue schedules)"),
    service: NotificationService = Depends(get_notification_service),
):
    """Active schedules coming due, earliest first"""
    return service.get_notifications(patientId, unread, days, pastDays)


@router.get("/stats", response_model=NotificationStats)
async def get_notification_stats(
    days: int = Query(DEFAULT_WINDOW_DAYS),
    pastDays: int = Query(0),
    service: NotificationService = Depends(get_notification_service),
):
    return service.get_stats(days, pastDays)


@router.post("/read-all")
async def mark_all_notifications_read(
    data: MarkAllRead,
    service: NotificationService = Depends(get_notification_service),
):
    return service.mark_all_as_read(data)


@router.post("/{notification_id}/read")
async def mark_notification_read(
    notification_id: str,
    service: NotificationService = Depends(get_notification_service),
):
    return service.mark_as_read(notification_id)


@router.post("/{notification_id}/dismiss")
async def dismiss_notification(
    notification_id: str,
    service: NotificationService = Depends(get_notification_service),
):
    """Dismiss a notification by deactivating its schedule"""
    return service.dismiss(notification_id)
