import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.core.auth_dependency import get_current_user_obj, get_db
from app.core.errors import CareerpilotError, to_http_exception
from app.db.models.application import ApplicationStatus
from app.db.models.user import User
from app.schemas.application import (
    ApplicationCreateRequest,
    ApplicationStatusUpdateRequest,
    ApplicationResponse,
    ApplicationListResponse,
)
from app.services.application_service import create_application, list_applications, update_status

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/applications", tags=["Applications"])


# ✅ LOG A JOB APPLICATION
@router.post("", response_model=ApplicationResponse, status_code=status.HTTP_201_CREATED)
def create(
    payload: ApplicationCreateRequest,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    try:
        application = create_application(db, user.id, payload.model_dump())
    except CareerpilotError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Failed to create application: user_id={user.id}, error={e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create application"
        )
    return ApplicationResponse.model_validate(application)


# ✅ GET ALL USER APPLICATIONS
@router.get("", response_model=ApplicationListResponse)
def list_my_applications(
    status_filter: Optional[ApplicationStatus] = Query(None, alias="status"),
    limit: int = Query(50, ge=1, le=100),
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    applications = list_applications(db, user.id, status=status_filter, limit=limit)
    return ApplicationListResponse(
        applications=[ApplicationResponse.model_validate(a) for a in applications],
        count=len(applications),
    )


# ✅ MOVE AN APPLICATION THROUGH THE PIPELINE
@router.patch("/{application_id}/status", response_model=ApplicationResponse)
def change_status(
    application_id: int,
    payload: ApplicationStatusUpdateRequest,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    try:
        application = update_status(db, application_id, user.id, payload.status, payload.notes)
    except CareerpilotError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Failed to update application status: application_id={application_id}, error={e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update application status"
        )
    return ApplicationResponse.model_validate(application)
