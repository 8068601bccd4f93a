import logging
from fastapi import APIRouter, UploadFile, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.auth_dependency import get_current_user_obj, get_db
from app.db.models.resume import Resume
from app.db.models.user import User
from app.schemas.profile import ResumeCreateRequest, ResumeResponse, ResumeListResponse
from app.services.activity_service import log_activity_best_effort
from app.services.profile_service import add_resume, list_resumes
from app.services.resume_parser import parse_resume

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/resume", tags=["Resume"])

PREVIEW_CHARS = 200
MAX_UPLOAD_BYTES = 5 * 1024 * 1024


def _to_response(resume: Resume) -> ResumeResponse:
    return ResumeResponse(
        id=resume.id,
        original_file=resume.original_file,
        is_primary=resume.is_primary,
        created_at=resume.created_at,
        preview=(resume.parsed_text or "")[:PREVIEW_CHARS],
    )


def _store(db: Session, user: User, text: str, original_file, make_primary: bool) -> ResumeResponse:
    try:
        resume = add_resume(db, user.id, text, original_file=original_file, make_primary=make_primary)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to store resume: user_id={user.id}, error={e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to store resume"
        )
    log_activity_best_effort(db, user.id, "resume_uploaded", {
        "resume_id": resume.id,
        "original_file": original_file,
    })
    return _to_response(resume)


# ✅ PASTED RESUME TEXT
@router.post("", response_model=ResumeResponse, status_code=status.HTTP_201_CREATED)
def create_resume(
    payload: ResumeCreateRequest,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    text = payload.text.strip()
    if not text:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Resume text is required")
    return _store(db, user, text, None, payload.is_primary)


# ✅ PDF UPLOAD
@router.post("/upload", response_model=ResumeResponse, status_code=status.HTTP_201_CREATED)
async def upload_resume(
    file: UploadFile,
    is_primary: bool = False,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    filename = file.filename or "resume.pdf"
    if file.content_type != "application/pdf" and not filename.lower().endswith(".pdf"):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Only PDF resumes are supported")

    if file.size is not None and file.size > MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail="Resume file too large")

    # One byte past the limit is enough to know the file is too large
    data = await file.read(MAX_UPLOAD_BYTES + 1)
    if not data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Uploaded file is empty")
    if len(data) > MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail="Resume file too large")

    try:
        parsed_text = parse_resume(data)
    except Exception as e:
        logger.warning(f"Resume PDF could not be parsed: user_id={user.id}, error={e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Could not read PDF")

    if not parsed_text:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="PDF contains no extractable text")

    return _store(db, user, parsed_text, filename, is_primary)


@router.get("", response_model=ResumeListResponse)
def get_resumes(
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """Resumes of the caller, primary first."""
    return ResumeListResponse(resumes=[_to_response(r) for r in list_resumes(db, user.id)])
