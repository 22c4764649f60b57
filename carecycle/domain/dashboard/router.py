"""Dashboard router - Aggregates and the live change stream"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from ... import config
from ...auth import require_api_token
from ...database import get_db
from ...realtime import DASHBOARD_CHANNEL
from ...redis_client import get_async_redis_client
from .schemas import DashboardRecent, DashboardStats, DashboardTrends
from .service import DashboardService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"], dependencies=[Depends(require_api_token)])

KEEPALIVE_SECONDS = 15.0


def get_dashboard_service(db: Session = Depends(get_db)) -> DashboardService:
    """Dependency injection for DashboardService"""
    return DashboardService(db)


@router.get("/stats", response_model=DashboardStats)
async def get_dashboard_stats(service: DashboardService = Depends(get_dashboard_service)):
    """Patient count, today's workload, overdue items and completion rates"""
    return service.get_stats()


@router.get("/recent", response_model=DashboardRecent)
async def get_recent_activity(service: DashboardService = Depends(get_dashboard_service)):
    return service.get_recent()


@router.get("/trends", response_model=DashboardTrends)
async def get_dashboard_trends(service: DashboardService = Depends(get_dashboard_service)):
    """Weekly completion rates for the last four weeks and the item type mix"""
    return service.get_trends()


@router.get("/events")
async def dashboard_events(request: Request):
    """
    Server-sent events stream of data change notifications.
    Clients re-fetch the dashboard endpoints when an event arrives.
    """
    if not config.CACHE_ENABLED:
        raise HTTPException(status_code=503, detail="Realtime updates are not available")

    client = get_async_redis_client()
    try:
        await client.ping()
    except Exception as e:
        logger.warning(f"Dashboard event stream unavailable: {e}")
        await client.aclose()
        raise HTTPException(status_code=503, detail="Realtime updates are not available")

    async def event_stream():
        pubsub = client.pubsub()
        await pubsub.subscribe(DASHBOARD_CHANNEL)
        logger.info(f"Dashboard subscriber connected from {request.client.host if request.client else 'unknown'}")
        try:
            while not await request.is_disconnected():
                message = await pubsub.get_message(
                    ignore_subscribe_messages=True, timeout=KEEPALIVE_SECONDS
                )
                if message and message.get("type") == "message":
                    yield f"event: data_changed\ndata: {message['data']}\n\n"
                else:
                    yield ": keepalive\n\n"
        finally:
            await pubsub.unsubscribe(DASHBOARD_CHANNEL)
            await pubsub.aclose()
            await client.aclose()
            logger.info("Dashboard subscriber disconnected")

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
