"""
Dashboard endpoint: one call for the numbers shown on the home screen.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.auth_dependency import get_current_user_obj, get_db
from app.db.models.user import User
from app.schemas.application import DashboardSummaryResponse
from app.services.dashboard_service import build_summary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/summary", response_model=DashboardSummaryResponse)
def get_summary(
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    try:
        return build_summary(db, user.id)
    except Exception as e:
        logger.error(f"Failed to build dashboard summary: user_id={user.id}, error={e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch dashboard summary"
        )
