"""
Dashboard service - Statistics, recent activity and weekly trends

Results are cached in Redis per day and invalidated whenever a tracked
table changes (see carecycle.realtime).
"""

import logging
from datetime import timedelta

from sqlalchemy.orm import Session

from ...cache import dashboard_key, get_or_compute
from ...models import ITEM_TYPES
from ...scheduling import (
    completion_rate,
    days_until_due,
    format_week_label,
    month_start,
    today,
    week_start,
)
from ..schedules.repository import ScheduleRepository
from .repository import DashboardRepository
from .schemas import (
    CompletionRates,
    DashboardRecent,
    DashboardStats,
    DashboardTrends,
    ItemTypeShare,
    RecentActivity,
    UpcomingSchedule,
    WeeklyCompletionRate,
)

logger = logging.getLogger(__name__)

RECENT_LIMIT = 10
TREND_WEEKS = 4
DISTRIBUTION_DAYS = 30
ITEM_TYPE_LABELS = {"test": "검사", "injection": "주사"}


class DashboardService:
    """Service layer for dashboard aggregates"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = DashboardRepository()
        self.schedule_repo = ScheduleRepository()

    def _rate(self, start, end) -> float:
        completed, total = self.repo.history_counts(self.db, start, end)
        return completion_rate(completed, total)

    def compute_stats(self) -> DashboardStats:
        current = today()
        this_week = week_start(current)
        this_month = month_start(current)

        return DashboardStats(
            totalPatients=self.repo.count_patients(self.db),
            todayScheduled=self.repo.count_due_on(self.db, current),
            overdueItems=self.schedule_repo.count_overdue(self.db, current),
            completionRates=CompletionRates(
                today=self._rate(current, current),
                thisWeek=self._rate(this_week, current),
                thisMonth=self._rate(this_month, current),
            ),
        )

    def compute_recent(self) -> DashboardRecent:
        current = today()

        recent_activity = []
        for entry in self.repo.recent_completed(self.db, RECENT_LIMIT):
            schedule = entry.schedule
            recent_activity.append(
                RecentActivity(
                    id=entry.id,
                    scheduleId=schedule.id,
                    patientName=schedule.patient.name,
                    patientNumber=schedule.patient.patient_number,
                    itemName=schedule.item.name,
                    itemType=schedule.item.type,
                    scheduledDate=entry.scheduled_date,
                    completedDate=entry.completed_date,
                    actualCompletionDate=entry.actual_completion_date,
                    status=entry.status,
                    notes=entry.notes,
                )
            )

        upcoming = [
            UpcomingSchedule(
                id=schedule.id,
                patientName=schedule.patient.name,
                patientNumber=schedule.patient.patient_number,
                itemName=schedule.item.name,
                itemType=schedule.item.type,
                dueDate=schedule.next_due_date,
                daysDue=days_until_due(schedule.next_due_date, current),
            )
            for schedule in self.schedule_repo.get_due_between(self.db, current, limit=RECENT_LIMIT)
        ]

        return DashboardRecent(recentActivity=recent_activity, upcomingSchedules=upcoming)

    def compute_trends(self) -> DashboardTrends:
        current = today()
        first_week = week_start(current) - timedelta(weeks=TREND_WEEKS - 1)

        weekly_trends = []
        for offset in range(TREND_WEEKS):
            start = first_week + timedelta(weeks=offset)
            end = start + timedelta(days=6)
            completed, total = self.repo.history_counts(self.db, start, end)
            weekly_trends.append(
                WeeklyCompletionRate(
                    week=start,
                    weekLabel=format_week_label(start, end),
                    completionRate=int(completion_rate(completed, total, digits=0)),
                    completedCount=completed,
                    totalScheduled=total,
                )
            )

        counts = self.repo.counts_by_item_type(self.db, current - timedelta(days=DISTRIBUTION_DAYS))
        total = sum(counts.get(t, 0) for t in ITEM_TYPES)
        distribution = [
            ItemTypeShare(
                type=item_type,
                label=ITEM_TYPE_LABELS[item_type],
                count=counts.get(item_type, 0),
                percentage=int(completion_rate(counts.get(item_type, 0), total, digits=0)),
            )
            for item_type in ITEM_TYPES
        ]

        return DashboardTrends(weeklyCompletionRates=weekly_trends, itemTypeDistribution=distribution)

    # Cached entry points. Keys include the date so a new day never reuses yesterday's numbers.

    def get_stats(self) -> dict:
        return get_or_compute(
            dashboard_key("stats", today()),
            lambda: self.compute_stats().model_dump(mode="json"),
        )

    def get_recent(self) -> dict:
        return get_or_compute(
            dashboard_key("recent", today()),
            lambda: self.compute_recent().model_dump(mode="json"),
        )

    def get_trends(self) -> dict:
        return get_or_compute(
            dashboard_key("trends", today()),
            lambda: self.compute_trends().model_dump(mode="json"),
        )
