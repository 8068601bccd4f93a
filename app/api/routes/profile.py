"""
Career profile endpoints.

The profile feeds the candidate context of mock interviews.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.auth_dependency import get_current_user_obj, get_db
from app.db.models.user import User
from app.schemas.profile import ProfileUpdateRequest, ProfileResponse
from app.services.activity_service import log_activity_best_effort
from app.services.profile_service import get_profile, upsert_profile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profile", tags=["Profile"])


@router.get("", response_model=ProfileResponse)
def read_profile(
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    profile = get_profile(db, user.id)
    if profile is None:
        # Nothing saved yet
        return ProfileResponse(user_id=user.id)
    return ProfileResponse.model_validate(profile)


@router.put("", response_model=ProfileResponse)
def update_profile(
    payload: ProfileUpdateRequest,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """Update the given profile fields, creating the profile on first use."""
    updates = payload.model_dump(exclude_unset=True)
    try:
        profile = upsert_profile(db, user.id, updates)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to update profile: user_id={user.id}, error={e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update profile"
        )

    log_activity_best_effort(db, user.id, "profile_updated", {"fields": sorted(updates)})
    return ProfileResponse.model_validate(profile)
