"""Schedule domain schemas"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import clean_text


class SchedulePatient(BaseModel):
    id: str
    name: str
    patientNumber: str


class ScheduleItem(BaseModel):
    id: str
    name: str
    type: str


class DueSchedule(BaseModel):
    """A schedule occurrence that is due on scheduledDate"""

    scheduleId: str
    scheduledDate: date
    patient: SchedulePatient
    item: ScheduleItem


class DueScheduleWithDays(DueSchedule):
    daysUntilDue: int
    status: str  # overdue, today, upcoming, future


class ScheduleUpdate(BaseModel):
    """Mark the occurrence at the schedule's current due date complete or not"""

    scheduleId: str
    isCompleted: bool
    notes: Optional[str] = None
    actualCompletionDate: Optional[date] = None

    @field_validator("notes")
    @classmethod
    def validate_notes(cls, v):
        return clean_text(v, 1000, "Notes") or None


class HistoryEntry(BaseModel):
    id: str
    scheduledDate: date
    completedDate: Optional[date] = None
    actualCompletionDate: Optional[date] = None
    status: str
    notes: Optional[str] = None
    createdAt: datetime


class ScheduleStats(BaseModel):
    todayTotal: int
    todayCompleted: int
    todayCompletionRate: float
    overdueCount: int
