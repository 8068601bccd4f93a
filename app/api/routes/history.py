"""
History/Activity endpoints.

Provides the timeline of user actions (interview progress, resume uploads,
profile edits and job applications).
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from app.db.models.user import User
from app.core.auth_dependency import get_current_user_obj, get_db
from app.services.activity_service import ACTIVITY_TYPES, list_activity
from app.schemas.history import (
    HistoryEntryResponse,
    HistoryListResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/history", tags=["History"])


@router.get("", status_code=status.HTTP_200_OK, response_model=HistoryListResponse)
def get_history(
    type: Optional[str] = Query(None, description="Filter by activity type"),
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(20, ge=1, le=100, description="Items per page"),
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """
    Get activity timeline for the authenticated user.

    Returns a paginated list of activity entries, newest first.
    """
    if type is not None and type not in ACTIVITY_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown activity type. Expected one of: {', '.join(ACTIVITY_TYPES)}"
        )

    try:
        entries, total = list_activity(db, user.id, activity_type=type, page=page, page_size=page_size)
    except Exception as e:
        logger.error(f"Failed to get history: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to get history"
        )

    logger.debug(f"History listed: user_id={user.id}, total={total}, page={page}")

    return HistoryListResponse(
        entries=[HistoryEntryResponse.model_validate(entry) for entry in entries],
        total=total,
        page=page,
        page_size=page_size
    )
