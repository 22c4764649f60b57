"""Dashboard response schemas"""

from datetime import date
from typing import Optional

from pydantic import BaseModel


class CompletionRates(BaseModel):
    today: float
    thisWeek: float
    thisMonth: float


class DashboardStats(BaseModel):
    totalPatients: int
    todayScheduled: int
    overdueItems: int
    completionRates: CompletionRates


class RecentActivity(BaseModel):
    id: str
    scheduleId: str
    patientName: str
    patientNumber: str
    itemName: str
    itemType: str
    scheduledDate: date
    completedDate: Optional[date] = None
    actualCompletionDate: Optional[date] = None
    status: str
    notes: Optional[str] = None


class UpcomingSchedule(BaseModel):
    id: str
    patientName: str
    patientNumber: str
    itemName: str
    itemType: str
    dueDate: date
    daysDue: int


class DashboardRecent(BaseModel):
    recentActivity: list[RecentActivity]
    upcomingSchedules: list[UpcomingSchedule]


class WeeklyCompletionRate(BaseModel):
    week: date  # Sunday that starts the week
    weekLabel: str
    completionRate: int
    completedCount: int
    totalScheduled: int


class ItemTypeShare(BaseModel):
    type: str
    label: str
    count: int
    percentage: int


class DashboardTrends(BaseModel):
    weeklyCompletionRates: list[WeeklyCompletionRate]
    itemTypeDistribution: list[ItemTypeShare]
