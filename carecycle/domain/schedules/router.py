"""Schedule router - FastAPI endpoints for due schedules and completion"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import require_api_token
from ...database import get_db
from .schemas import DueSchedule, DueScheduleWithDays, HistoryEntry, ScheduleStats, ScheduleUpdate
from .service import ScheduleService

router = APIRouter(prefix="/api/schedule", tags=["Schedules"], dependencies=[Depends(require_api_token)])


def get_schedule_service(db: Session = Depends(get_db)) -> ScheduleService:
    """Dependency injection for ScheduleService"""
    return ScheduleService(db)


@router.get("/today", response_model=list[DueSchedule])
async def get_today_schedules(service: ScheduleService = Depends(get_schedule_service)):
    """Active schedules due today"""
    return service.get_today_schedules()


@router.post("/update")
async def update_schedule(
    data: ScheduleUpdate,
    service: ScheduleService = Depends(get_schedule_service),
):
    """Mark the current occurrence of a schedule completed or pending"""
    return service.update_schedule(data)


@router.get("/overdue", response_model=list[DueScheduleWithDays])
async def get_overdue_schedules(service: ScheduleService = Depends(get_schedule_service)):
    return service.get_overdue_schedules()


@router.get("/upcoming", response_model=list[DueScheduleWithDays])
async def get_upcoming_schedules(
    days: int = Query(7, description="Look-ahead window in days"),
    service: ScheduleService = Depends(get_schedule_service),
):
    return service.get_upcoming_schedules(days)


@router.get("/stats", response_model=ScheduleStats)
async def get_schedule_stats(service: ScheduleService = Depends(get_schedule_service)):
    return service.get_stats()


@router.get("/{schedule_id}/history", response_model=list[HistoryEntry])
async def get_schedule_history(
    schedule_id: str,
    service: ScheduleService = Depends(get_schedule_service),
):
    """Occurrences of a schedule, newest first"""
    return service.get_schedule_history(schedule_id)
