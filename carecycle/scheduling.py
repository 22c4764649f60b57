"""
Recurrence and due-date arithmetic for patient schedules.

All functions work on calendar dates (no times). "today" is resolved in the
configured APP_TIMEZONE so that a schedule due today is due today for the
clinic, not for the server.
"""

import math
from datetime import date, datetime, timedelta
from typing import Union
from zoneinfo import ZoneInfo

from dateutil.relativedelta import relativedelta

from .config import APP_TIMEZONE

DateLike = Union[date, str]

MONTH_ABBR = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def today() -> date:
    """Current date in the application timezone"""
    return datetime.now(ZoneInfo(APP_TIMEZONE)).date()


def to_date(value: DateLike) -> date:
    """Accept a date, datetime or ISO string (YYYY-MM-DD, optionally with a time part)"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            raise ValueError("Invalid date provided") from None
    raise ValueError("Invalid date provided")


def calculate_next_due_date(base_date: DateLike, period_value: int, period_unit: str) -> date:
    """Next due date one period after base_date"""
    base = to_date(base_date)

    if period_value is None or period_value <= 0:
        raise ValueError("Period value must be positive")

    if period_unit == "weeks":
        return base + timedelta(weeks=period_value)
    if period_unit == "months":
        return base + relativedelta(months=period_value)
    raise ValueError(f"Invalid period unit: {period_unit}")


def days_until_due(due_date: DateLike, reference: date | None = None) -> int:
    return (to_date(due_date) - (reference or today())).days


def is_overdue(due_date: DateLike, reference: date | None = None) -> bool:
    return days_until_due(due_date, reference) < 0


def format_schedule_status(days: int) -> dict:
    if days < 0:
        return {"status": "overdue", "urgency": "critical", "color": "red"}
    if days == 0:
        return {"status": "today", "urgency": "high", "color": "orange"}
    if days <= 7:
        return {"status": "upcoming", "urgency": "medium", "color": "yellow"}
    return {"status": "future", "urgency": "low", "color": "green"}


INTERVAL_LABELS = {
    1: "매주",
    2: "격주",
    4: "매월",
    12: "분기별",
    26: "반기별",
    52: "연간",
}


def format_interval_weeks(weeks: int) -> str:
    """Human readable (Korean) label for a care item interval"""
    if weeks in INTERVAL_LABELS:
        return INTERVAL_LABELS[weeks]
    if weeks < 52:
        return f"{weeks}주마다"
    years = math.floor(weeks * 10 / 52 + 0.5) / 10
    # 260 -> "5년마다", 78 -> "1.5년마다"
    years_str = str(int(years)) if years == int(years) else str(years)
    return f"{years_str}년마다"


def week_start(day: date) -> date:
    """Sunday that starts the week containing `day`"""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def month_start(day: date) -> date:
    return day.replace(day=1)


def format_week_label(start: date, end: date) -> str:
    start_month = MONTH_ABBR[start.month - 1]
    end_month = MONTH_ABBR[end.month - 1]
    if start_month == end_month:
        return f"{start_month} {start.day}-{end.day}"
    return f"{start_month} {start.day}-{end_month} {end.day}"


def completion_rate(completed: int, total: int, digits: int = 1) -> float:
    """Percentage of completed occurrences, rounded half up. 0 when nothing was scheduled."""
    if not total:
        return 0
    scale = 10**digits
    return math.floor(completed * 100 * scale / total + 0.5) / scale
