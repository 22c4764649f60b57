"""Notification schemas - due schedules presented as notifications"""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel

NotificationPriority = Literal["low", "medium", "high", "urgent"]
NotificationStatus = Literal["pending", "read", "dismissed", "expired"]


class NotificationPatient(BaseModel):
    id: str
    name: str
    patientNumber: str


class NotificationItem(BaseModel):
    id: str
    name: str
    type: str
    periodValue: int
    periodUnit: str


class Notification(BaseModel):
    id: str  # The patient schedule id
    patientId: str
    itemId: str
    nextDueDate: date
    isNotified: bool
    isActive: bool
    createdAt: datetime
    updatedAt: datetime
    patient: NotificationPatient
    item: NotificationItem

    # Computed
    daysUntilDue: int
    priority: NotificationPriority
    status: NotificationStatus
    formattedDueDate: str
    isOverdue: bool
    isToday: bool
    isTomorrow: bool


class MarkAllRead(BaseModel):
    ids: list[str] = []


class NotificationStats(BaseModel):
    total: int
    unread: int
    today: int
    upcoming: int
    overdue: int
    byType: dict[str, int]
    byPriority: dict[str, int]
