"""
Job application tracking service.

Every status change appends to the application's timeline; the timeline is
never rewritten.
"""
import logging
from datetime import datetime, timezone
from typing import Optional, Dict, Any, List

from sqlalchemy import desc
from sqlalchemy.orm import Session

from app.core.errors import ApplicationNotFound, InvalidInput
from app.db.models.application import Application, ApplicationStatus
from app.db.models.resume import Resume
from app.services.activity_service import log_activity_best_effort

logger = logging.getLogger(__name__)

APPLICATION_FIELDS = ("company", "job_title", "location", "job_url", "resume_id", "cover_letter", "notes", "source")


def _timeline_entry(status: ApplicationStatus, when: datetime, notes: str) -> Dict[str, Any]:
    return {"status": status.value, "date": when.isoformat(), "notes": notes}


def create_application(db: Session, user_id: int, data: Dict[str, Any]) -> Application:
    """
    Record a submitted application in status `applied`.

    Raises:
        InvalidInput: blank company/job title, or a resume the user does not own
    """
    values = {key: data.get(key) for key in APPLICATION_FIELDS}
    for key in ("company", "job_title"):
        values[key] = (values[key] or "").strip()
        if not values[key]:
            raise InvalidInput(f"{key} is required")
    values["source"] = (values["source"] or "").strip() or "manual"

    if values["resume_id"] is not None:
        owned = db.query(Resume.id).filter(Resume.id == values["resume_id"], Resume.user_id == user_id).first()
        if owned is None:
            raise InvalidInput("Resume not found")

    now = datetime.now(timezone.utc)
    application = Application(
        user_id=user_id,
        status=ApplicationStatus.APPLIED,
        applied_at=now,
        last_status_change_at=now,
        timeline=[_timeline_entry(ApplicationStatus.APPLIED, now, "Application submitted")],
        **values,
    )
    try:
        db.add(application)
        db.commit()
        db.refresh(application)
    except Exception:
        db.rollback()
        logger.error(f"Failed to create application: user_id={user_id}", exc_info=True)
        raise

    logger.info(f"Application created: application_id={application.id}, user_id={user_id}")
    log_activity_best_effort(db, user_id, "application_created", {
        "application_id": application.id,
        "job_title": application.job_title,
        "company": application.company,
    })
    return application


def get_application(db: Session, application_id: int, user_id: int) -> Application:
    application = (
        db.query(Application)
        .filter(Application.id == application_id, Application.user_id == user_id)
        .first()
    )
    if application is None:
        raise ApplicationNotFound()
    return application


def list_applications(
    db: Session,
    user_id: int,
    status: Optional[ApplicationStatus] = None,
    limit: int = 50,
) -> List[Application]:
    """The user's applications, most recently applied first."""
    query = db.query(Application).filter(Application.user_id == user_id)
    if status is not None:
        query = query.filter(Application.status == status)
    return query.order_by(desc(Application.applied_at), desc(Application.id)).limit(limit).all()


def update_status(
    db: Session,
    application_id: int,
    user_id: int,
    status: ApplicationStatus,
    notes: Optional[str] = None,
) -> Application:
    """
    Move an application to a new status and append it to the timeline.

    Raises:
        ApplicationNotFound: unknown id or owned by another user
    """
    application = get_application(db, application_id, user_id)
    status = ApplicationStatus(status)
    now = datetime.now(timezone.utc)

    application.status = status
    application.last_status_change_at = now
    # Reassign so the JSON column is flagged dirty
    application.timeline = list(application.timeline or []) + [
        _timeline_entry(status, now, (notes or "").strip() or f"Status updated to {status.value}")
    ]
    try:
        db.commit()
        db.refresh(application)
    except Exception:
        db.rollback()
        logger.error(f"Failed to update application status: application_id={application_id}", exc_info=True)
        raise

    logger.info(f"Application status changed: application_id={application_id}, status={status.value}")
    log_activity_best_effort(db, user_id, "application_status_changed", {
        "application_id": application.id,
        "job_title": application.job_title,
        "company": application.company,
        "status": status.value,
    })
    return application
