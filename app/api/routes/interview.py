"""
Mock interview endpoints.

Thin glue around InterviewEngine: authenticate, validate, call the engine,
shape the camelCase response.
"""
import base64
import logging
from typing import Union
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from app.core.auth_dependency import get_current_user_obj, get_db
from app.core.errors import CareerpilotError, to_http_exception
from app.db.models.interview_session import InterviewMode
from app.db.models.user import User
from app.schemas.interview import (
    StartInterviewRequest,
    StartInterviewResponse,
    SubmitAnswerRequest,
    AnswerContinueResponse,
    AnswerCompleteResponse,
    VoiceAnswerContinueResponse,
    VoiceAnswerCompleteResponse,
    CompletedSessionResponse,
    EvaluationResponse,
    SpeechPayload,
    SpeechRequest,
    SpeechResponse,
    SessionListResponse,
    SessionSummaryResponse,
    SessionDetailResponse,
    QuestionResponse,
    AnswerResponse,
    InterviewOptions,
)
from app.services.interview_engine import InterviewEngine
from app.services.interview_types import TurnResult, VoiceTurnResult
from app.services.profile_service import load_candidate_context
from app.services.speech_engine import SPEECH_MIME

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/interview", tags=["Interview"])

# Transcription endpoint upload limit
MAX_AUDIO_BYTES = 25 * 1024 * 1024


def get_interview_engine(request: Request) -> InterviewEngine:
    """InterviewEngine dependency built by the app lifespan."""
    return request.app.state.interview_engine


async def _read_audio(request: Request) -> bytes:
    """Read the request body, stopping as soon as it passes MAX_AUDIO_BYTES."""
    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > MAX_AUDIO_BYTES:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail="Audio too large")

    chunks = []
    received = 0
    async for chunk in request.stream():
        received += len(chunk)
        if received > MAX_AUDIO_BYTES:
            raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail="Audio too large")
        chunks.append(chunk)
    return b"".join(chunks)


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _evaluation(turn: TurnResult) -> EvaluationResponse:
    return EvaluationResponse(**turn.evaluation.to_dict())


def _turn_response(turn: TurnResult) -> Union[AnswerContinueResponse, AnswerCompleteResponse]:
    if turn.complete:
        return AnswerCompleteResponse(
            session=CompletedSessionResponse(
                id=turn.session_id,
                overall_score=turn.overall_score,
                total_questions=turn.questions_asked,
                feedback=turn.final_feedback,
            ),
            evaluation=_evaluation(turn),
        )
    return AnswerContinueResponse(
        current_score=turn.evaluation.score,
        feedback=turn.evaluation.feedback,
        next_question=turn.next_question,
        question_number=turn.question_number,
        total_questions=turn.total_questions,
        evaluation=_evaluation(turn),
    )


def _voice_response(result: VoiceTurnResult) -> Union[VoiceAnswerContinueResponse, VoiceAnswerCompleteResponse]:
    base = _turn_response(result.turn)
    tts = SpeechPayload(
        mime=SPEECH_MIME,
        feedback_base64=_b64(result.feedback_audio),
        next_question_base64=_b64(result.next_question_audio) if result.next_question_audio else None,
    )
    response_cls = VoiceAnswerCompleteResponse if result.turn.complete else VoiceAnswerContinueResponse
    return response_cls(**base.model_dump(), transcript=result.turn.answer, tts=tts)


# ✅ START SESSION
@router.post("/start", response_model=StartInterviewResponse, status_code=status.HTTP_201_CREATED)
def start_interview(
    payload: StartInterviewRequest,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db),
    engine: InterviewEngine = Depends(get_interview_engine),
):
    """Start a mock interview and return its first question."""
    try:
        candidate = load_candidate_context(db, user.id)
        result = engine.start_session(
            db,
            user_id=user.id,
            target_role=payload.target_role,
            mode=payload.mode,
            settings=payload.options.model_dump() if payload.options else None,
            candidate=candidate,
        )
    except CareerpilotError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Failed to start interview: user_id={user.id}, error={e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to start interview"
        )

    return StartInterviewResponse(
        session_id=result.session_id,
        current_question=result.current_question,
        question_number=result.question_number,
        total_questions=result.total_questions,
    )


# ✅ TYPED ANSWER
@router.post(
    "/next",
    response_model=Union[AnswerContinueResponse, AnswerCompleteResponse],
    response_model_exclude_none=True,
)
def submit_answer(
    payload: SubmitAnswerRequest,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db),
    engine: InterviewEngine = Depends(get_interview_engine),
):
    """Score the answer to the current question and return the next question or the final result."""
    try:
        turn = engine.submit_answer(db, payload.session_id, user.id, payload.answer)
    except CareerpilotError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Failed to process answer: session_id={payload.session_id}, error={e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to process answer"
        )
    return _turn_response(turn)


# ✅ SPOKEN ANSWER
@router.post(
    "/voice",
    response_model=Union[VoiceAnswerContinueResponse, VoiceAnswerCompleteResponse],
    response_model_exclude_none=True,
)
async def submit_voice_answer(
    request: Request,
    session_id: str = Query(..., alias="sessionId", min_length=1),
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db),
    engine: InterviewEngine = Depends(get_interview_engine),
):
    """
    Accept a raw audio/* body, transcribe it, score it, and return spoken feedback.
    """
    content_type = request.headers.get("content-type", "")
    if not content_type.lower().startswith("audio/"):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Content-Type must be audio/*")

    audio = await _read_audio(request)

    try:
        result = await run_in_threadpool(
            engine.submit_voice_answer, db, session_id, user.id, audio, content_type
        )
    except CareerpilotError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Failed to process voice answer: session_id={session_id}, error={e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to process voice answer"
        )
    return _voice_response(result)


# ✅ SPEAK TEXT
@router.post("/tts", response_model=SpeechResponse)
def synthesize_speech(
    payload: SpeechRequest,
    user: User = Depends(get_current_user_obj),
    engine: InterviewEngine = Depends(get_interview_engine),
):
    """Synthesize interview text (e.g. replay a question) as MP3."""
    try:
        audio = engine.speak(payload.text, voice=payload.voice_id)
    except CareerpilotError as e:
        raise to_http_exception(e)
    return SpeechResponse(mime=SPEECH_MIME, audio_base64=_b64(audio))


# ✅ FINISHED SESSIONS
@router.get("/sessions", response_model=SessionListResponse)
def list_sessions(
    limit: int = Query(10, ge=1, le=50),
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db),
    engine: InterviewEngine = Depends(get_interview_engine),
):
    """List the caller's completed interviews, newest first."""
    summaries = engine.list_completed_sessions(db, user.id, limit=limit)
    return SessionListResponse(sessions=[
        SessionSummaryResponse(
            id=s.id,
            target_role=s.target_role,
            mode=s.mode,
            overall_score=s.overall_score,
            question_count=s.question_count,
            started_at=s.started_at,
            completed_at=s.completed_at,
            duration=f"{s.duration_minutes} min" if s.duration_minutes is not None else None,
        )
        for s in summaries
    ])


# ✅ SINGLE SESSION
@router.get("/sessions/{session_id}", response_model=SessionDetailResponse)
def get_session(
    session_id: str,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db),
    engine: InterviewEngine = Depends(get_interview_engine),
):
    """Full transcript of one of the caller's sessions."""
    try:
        session = engine.get_session(db, session_id, user.id)
    except CareerpilotError as e:
        raise to_http_exception(e)

    return SessionDetailResponse(
        id=session.id,
        target_role=session.target_role,
        mode=InterviewMode(session.mode).value,
        state="complete" if session.is_complete else "active",
        question_number=len(session.questions),
        total_questions=session.total_questions,
        overall_score=session.overall_score,
        started_at=session.started_at,
        completed_at=session.completed_at,
        settings=InterviewOptions(**(session.settings or {})),
        questions=[QuestionResponse.model_validate(q) for q in session.questions],
        answers=[AnswerResponse.model_validate(a) for a in session.answers],
    )
