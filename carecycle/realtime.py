"""
Dashboard change notifications

Committed changes to the tracked tables are published on the Redis channel
`dashboard_update` and the cached dashboard aggregates are invalidated.
Subscribers (the /api/dashboard/events stream) re-fetch on notification.
"""

import json
import logging
import time

from sqlalchemy import event
from sqlalchemy.orm import Session

from .cache import cache, invalidate_dashboard_cache

logger = logging.getLogger(__name__)

DASHBOARD_CHANNEL = "dashboard_update"
TRACKED_TABLES = {"patients", "items", "care_items", "patient_schedules", "schedule_history"}

_PENDING_KEY = "dashboard_changes"


def record_change(session: Session, table: str, operation: str, record_id) -> None:
    """Queue a change for publishing once the session commits"""
    if table in TRACKED_TABLES:
        session.info.setdefault(_PENDING_KEY, []).append(
            {"table": table, "operation": operation, "record_id": record_id}
        )


def publish_changes(changes: list[dict]) -> int:
    """Publish changes and invalidate the dashboard cache. Returns messages sent."""
    if not changes:
        return 0

    invalidate_dashboard_cache()

    client = cache._get_client()
    if not client:
        return 0

    sent = 0
    for change in changes:
        payload = {
            "event": "data_changed",
            "timestamp": time.time(),
            **change,
        }
        try:
            client.publish(DASHBOARD_CHANNEL, json.dumps(payload, default=str))
            sent += 1
        except Exception as e:
            logger.warning(f"Failed to publish dashboard update: {e}")
            break
    return sent


@event.listens_for(Session, "after_flush")
def _collect_changes(session, _flush_context):
    for operation, instances in (
        ("INSERT", session.new),
        ("UPDATE", session.dirty),
        ("DELETE", session.deleted),
    ):
        for instance in instances:
            table = getattr(instance, "__tablename__", None)
            if operation == "UPDATE" and not session.is_modified(instance):
                continue
            record_change(session, table, operation, getattr(instance, "id", None))


@event.listens_for(Session, "after_commit")
def _publish_after_commit(session):
    changes = session.info.pop(_PENDING_KEY, [])
    try:
        publish_changes(changes)
    except Exception as e:
        logger.error(f"Dashboard notification failed: {e}")


@event.listens_for(Session, "after_rollback")
def _discard_on_rollback(session):
    session.info.pop(_PENDING_KEY, None)
