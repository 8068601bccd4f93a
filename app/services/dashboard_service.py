"""
Dashboard summary: application funnel, interview practice and recent activity.
"""
import logging
from collections import Counter
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Any, List

from sqlalchemy.orm import Session

from app.db.models.activity_log import ActivityLog
from app.db.models.application import Application, ApplicationStatus
from app.db.models.interview_session import InterviewSession
from app.services.activity_service import list_activity
from app.services.interview_engine import compute_overall_score

logger = logging.getLogger(__name__)

RECENT_ACTIVITY_LIMIT = 10

IN_PROGRESS_STATUSES = (ApplicationStatus.APPLIED, ApplicationStatus.VIEWED, ApplicationStatus.INTERVIEW)
RESPONDED_STATUSES = (ApplicationStatus.VIEWED, ApplicationStatus.INTERVIEW, ApplicationStatus.OFFER)


def _percent(part: int, whole: int) -> int:
    if not whole:
        return 0
    return int((Decimal(part) * 100 / Decimal(whole)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def describe_activity(entry: ActivityLog) -> str:
    """One-line, human readable text for a timeline entry."""
    meta = entry.meta or {}
    if entry.type == "application_created":
        return f"Applied to {meta.get('job_title') or 'a position'} at {meta.get('company') or 'a company'}"
    if entry.type == "application_status_changed":
        return f"Application status changed to {meta.get('status') or 'updated'}"
    if entry.type == "resume_uploaded":
        return f"Updated resume: {meta.get('original_file') or 'New resume uploaded'}"
    if entry.type == "interview_started":
        return f"Started mock interview for {meta.get('role') or 'a role'}"
    if entry.type == "interview_completed":
        score = meta.get("overall_score")
        return f"Completed mock interview with score {score if score is not None else 'N/A'}"
    if entry.type == "profile_updated":
        return "Updated your profile"
    return "Activity logged"


def build_summary(db: Session, user_id: int) -> Dict[str, Any]:
    statuses = Counter(
        ApplicationStatus(status)
        for (status,) in db.query(Application.status).filter(Application.user_id == user_id).all()
    )
    total_applications = sum(statuses.values())

    scores = [
        score
        for (score,) in db.query(InterviewSession.overall_score)
        .filter(InterviewSession.user_id == user_id, InterviewSession.completed_at.isnot(None))
        .all()
        if score is not None
    ]

    entries, _ = list_activity(db, user_id, page=1, page_size=RECENT_ACTIVITY_LIMIT)
    recent: List[Dict[str, Any]] = [
        {"id": entry.id, "type": entry.type, "text": describe_activity(entry), "created_at": entry.created_at}
        for entry in entries
    ]

    logger.debug(f"Dashboard summary built: user_id={user_id}, applications={total_applications}, practice={len(scores)}")

    return {
        "applications": {
            "total": total_applications,
            "in_progress": sum(statuses[s] for s in IN_PROGRESS_STATUSES),
            "interviews": statuses[ApplicationStatus.INTERVIEW],
            "offers": statuses[ApplicationStatus.OFFER],
            "response_rate": _percent(sum(statuses[s] for s in RESPONDED_STATUSES), total_applications),
        },
        "interviews": {
            "practice_count": len(scores),
            "average_score": compute_overall_score(scores) if scores else 0,
        },
        "recent_activity": recent,
    }
