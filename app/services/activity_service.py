"""
Activity log service.

Activity entries are a user-facing timeline. Writes that accompany another
operation go through `log_activity_best_effort`, which uses its own session
and never lets a failure reach the caller.
"""
import logging
from typing import Optional, Dict, Any, List, Tuple
from sqlalchemy import desc
from sqlalchemy.orm import Session

from app.db.models.activity_log import ActivityLog

logger = logging.getLogger(__name__)

ACTIVITY_TYPES = (
    "interview_started",
    "interview_completed",
    "resume_uploaded",
    "profile_updated",
    "application_created",
    "application_status_changed",
)


def log_activity(db: Session, user_id: int, activity_type: str, meta: Optional[Dict[str, Any]] = None) -> ActivityLog:
    """Record an activity entry and commit it."""
    if activity_type not in ACTIVITY_TYPES:
        raise ValueError(f"Unknown activity type: {activity_type}")
    entry = ActivityLog(user_id=user_id, type=activity_type, meta=meta or {})
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


def log_activity_best_effort(
    db: Session,
    user_id: int,
    activity_type: str,
    meta: Optional[Dict[str, Any]] = None,
) -> Optional[ActivityLog]:
    """
    Record an activity entry in a separate session bound to the same engine.

    Call only after the primary transaction has committed. Failures are logged
    and swallowed; the return value is None in that case.
    """
    try:
        with Session(bind=db.get_bind()) as log_db:
            return log_activity(log_db, user_id, activity_type, meta)
    except Exception as e:
        logger.warning(
            f"Failed to log activity (ignored): user_id={user_id}, type={activity_type}, "
            f"error={type(e).__name__}: {e}"
        )
        return None


def list_activity(
    db: Session,
    user_id: int,
    activity_type: Optional[str] = None,
    page: int = 1,
    page_size: int = 20,
) -> Tuple[List[ActivityLog], int]:
    """Return one page of the user's activity, newest first, and the total count."""
    query = db.query(ActivityLog).filter(ActivityLog.user_id == user_id)
    if activity_type:
        query = query.filter(ActivityLog.type == activity_type)

    total = query.count()
    offset = (page - 1) * page_size
    entries = (
        query.order_by(desc(ActivityLog.created_at), desc(ActivityLog.id))
        .offset(offset)
        .limit(page_size)
        .all()
    )
    return entries, total
