"""
Profile and resume service.

Stores the career details that become the candidate context of a mock interview.
"""
import logging
from typing import Optional, Dict, Any, List
from sqlalchemy import desc
from sqlalchemy.orm import Session

from app.db.models.profile import UserProfile
from app.db.models.resume import Resume
from app.services.interview_types import CandidateContext

logger = logging.getLogger(__name__)

RESUME_EXCERPT_CHARS = 500

PROFILE_FIELDS = ("headline", "current_role", "location", "skills", "experience_years")


def get_profile(db: Session, user_id: int) -> Optional[UserProfile]:
    return db.query(UserProfile).filter(UserProfile.user_id == user_id).first()


def upsert_profile(db: Session, user_id: int, updates: Dict[str, Any]) -> UserProfile:
    """Create the profile on first write, then apply the given fields."""
    profile = get_profile(db, user_id)
    if profile is None:
        profile = UserProfile(user_id=user_id, skills=[])
        db.add(profile)

    for key, value in updates.items():
        if key not in PROFILE_FIELDS:
            continue
        if key == "skills":
            value = [skill.strip() for skill in (value or []) if skill and skill.strip()]
        setattr(profile, key, value)

    db.commit()
    db.refresh(profile)
    logger.info(f"Profile updated: user_id={user_id}, fields={sorted(updates)}")
    return profile


def add_resume(
    db: Session,
    user_id: int,
    text: str,
    original_file: Optional[str] = None,
    make_primary: bool = False,
) -> Resume:
    """
    Store a resume. The user's first resume is always primary; making a new
    one primary clears the flag on the others.
    """
    has_primary = db.query(Resume).filter(Resume.user_id == user_id, Resume.is_primary.is_(True)).first() is not None
    is_primary = make_primary or not has_primary
    if is_primary and has_primary:
        db.query(Resume).filter(Resume.user_id == user_id).update(
            {Resume.is_primary: False}, synchronize_session=False
        )

    resume = Resume(user_id=user_id, parsed_text=text, original_file=original_file, is_primary=is_primary)
    db.add(resume)
    db.commit()
    db.refresh(resume)
    logger.info(f"Resume stored: user_id={user_id}, resume_id={resume.id}, primary={is_primary}")
    return resume


def list_resumes(db: Session, user_id: int) -> List[Resume]:
    return (
        db.query(Resume)
        .filter(Resume.user_id == user_id)
        .order_by(desc(Resume.is_primary), desc(Resume.created_at), desc(Resume.id))
        .all()
    )


def get_primary_resume(db: Session, user_id: int) -> Optional[Resume]:
    """Primary resume, else the most recent one."""
    resumes = list_resumes(db, user_id)
    return resumes[0] if resumes else None


def load_candidate_context(db: Session, user_id: int) -> CandidateContext:
    """Collect profile and primary resume details for the first interview question."""
    profile = get_profile(db, user_id)
    resume = get_primary_resume(db, user_id)
    excerpt = resume.parsed_text[:RESUME_EXCERPT_CHARS] if resume and resume.parsed_text else None

    if profile is None:
        return CandidateContext(resume_excerpt=excerpt)
    return CandidateContext(
        headline=profile.headline,
        skills=list(profile.skills or []),
        experience_years=profile.experience_years,
        resume_excerpt=excerpt,
        has_profile=True,
    )
