"""
Mock interview session engine.

Drives a session through ACTIVE(1) -> ACTIVE(2) -> ... -> COMPLETE:

- start_session creates the session with its first question.
- submit_answer / submit_voice_answer score the pending question, then either
  ask the next one or close the session with an overall score.

Every AI call is a single attempt. Question, evaluation and closing-feedback
failures fall back to static content from the FallbackBank; speech failures
propagate as UpstreamUnavailable.

Turn writes are guarded by a compare-and-swap on `answer_count`, so two
concurrent submissions for the same session cannot both land.
"""
import logging
import uuid
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, List, Dict, Any, Callable, Sequence

from sqlalchemy import desc
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from app.core.errors import (
    InvalidInput,
    SessionNotFound,
    InvalidSessionState,
    ConcurrentSubmission,
    UpstreamUnavailable,
)
from app.db.models.interview_session import (
    InterviewSession,
    InterviewQuestion,
    InterviewAnswer,
    InterviewMode,
    total_questions,
)
from app.llm.runner import LLMRunner
from app.services.activity_service import log_activity_best_effort
from app.services.interview_fallbacks import FallbackBank
from app.services.interview_prompts import (
    build_first_question_prompt,
    build_evaluation_prompt,
    build_next_question_prompt,
    build_closing_feedback_prompt,
    clean_question_text,
)
from app.services.interview_types import (
    AnswerEvaluation,
    CandidateContext,
    StartResult,
    TurnResult,
    VoiceTurnResult,
    SessionSummary,
)
from app.services.speech_engine import SpeechEngine

logger = logging.getLogger(__name__)

SETTINGS_KEYS = ("voice_enabled", "video_enabled")


def compute_overall_score(scores: Sequence[int]) -> int:
    """Arithmetic mean of the scores, rounded half up."""
    if not scores:
        raise ValueError("Cannot score a session without answers")
    mean = Decimal(sum(scores)) / Decimal(len(scores))
    return int(mean.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def parse_mode(mode: Any) -> InterviewMode:
    try:
        return InterviewMode(mode)
    except ValueError:
        allowed = ", ".join(m.value for m in InterviewMode)
        raise InvalidInput(f"Invalid interview mode '{mode}'. Expected one of: {allowed}")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class _OpenSession:
    """Detached copy of a session with a pending question, used while the AI calls run."""
    id: str
    user_id: int
    mode: InterviewMode
    target_role: str
    answer_count: int
    total_questions: int
    pending_question: str
    turns: tuple  # (question, answer, score) per answered question


@dataclass
class _TurnPlan:
    """Everything a turn will write, computed before anything is persisted."""
    session_id: str
    user_id: int
    expected_count: int
    current_index: int
    answer: str
    evaluation: AnswerEvaluation
    complete: bool
    total: int
    next_question: Optional[str] = None
    overall_score: Optional[int] = None
    final_feedback: Optional[str] = None

    def to_result(self) -> TurnResult:
        if self.complete:
            return TurnResult(
                session_id=self.session_id,
                complete=True,
                evaluation=self.evaluation,
                total_questions=self.total,
                answer=self.answer,
                overall_score=self.overall_score,
                final_feedback=self.final_feedback,
                questions_asked=self.current_index + 1,
            )
        return TurnResult(
            session_id=self.session_id,
            complete=False,
            evaluation=self.evaluation,
            total_questions=self.total,
            answer=self.answer,
            next_question=self.next_question,
            question_number=self.current_index + 2,
        )


class InterviewEngine:
    """Owns the question/answer/scoring state machine of mock interviews."""

    def __init__(
        self,
        llm: LLMRunner,
        fallbacks: FallbackBank,
        speech: Optional[SpeechEngine] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.llm = llm
        self.fallbacks = fallbacks
        self.speech = speech
        self._now = clock

    # ============================================
    # AI calls with fallbacks
    # ============================================

    def _generate_question(self, prompt: str, fallback: str, context: str) -> str:
        try:
            question = clean_question_text(self.llm.generate_text("interview_question", prompt))
            if not question:
                raise UpstreamUnavailable("question generation returned only quotes")
            return question
        except UpstreamUnavailable as e:
            logger.warning(f"Question generation failed, using fallback: {context}, error={e.message}")
            return fallback

    def _evaluate(self, session: _OpenSession, question: str, answer: str) -> AnswerEvaluation:
        prompt = build_evaluation_prompt(session.mode, session.target_role, question, answer)
        try:
            payload = self.llm.generate_json("interview_evaluation", prompt)
            return AnswerEvaluation.from_payload(payload)
        except (UpstreamUnavailable, ValueError, TypeError, OverflowError) as e:
            logger.warning(f"Answer evaluation failed, using fallback: session_id={session.id}, error={e}")
            return self.fallbacks.evaluation

    def _closing_feedback(self, session: _OpenSession, overall_score: int, turns: list) -> str:
        prompt = build_closing_feedback_prompt(session.mode, session.target_role, overall_score, turns)
        try:
            return self.llm.generate_text("interview_summary", prompt)
        except UpstreamUnavailable as e:
            logger.warning(f"Closing feedback failed, using fallback: session_id={session.id}, error={e.message}")
            return self.fallbacks.closing(overall_score, session.mode)

    # ============================================
    # Start
    # ============================================

    def start_session(
        self,
        db: Session,
        user_id: int,
        target_role: str,
        mode: Any,
        settings: Optional[Dict[str, Any]] = None,
        candidate: Optional[CandidateContext] = None,
    ) -> StartResult:
        """
        Create a session in ACTIVE(1) with its first question.

        Raises:
            InvalidInput: unknown mode or blank target role
        """
        mode = parse_mode(mode)
        target_role = (target_role or "").strip()
        if not target_role:
            raise InvalidInput("targetRole is required")

        first_question = self._generate_question(
            build_first_question_prompt(mode, target_role, candidate),
            self.fallbacks.first_question(mode, target_role),
            f"user_id={user_id}, mode={mode.value}, question=1",
        )

        now = self._now()
        session = InterviewSession(
            id=uuid.uuid4().hex,
            user_id=user_id,
            target_role=target_role,
            mode=mode,
            settings={k: bool(v) for k, v in (settings or {}).items() if k in SETTINGS_KEYS and v is not None},
            answer_count=0,
            started_at=now,
        )
        session.questions.append(InterviewQuestion(position=0, question=first_question, asked_at=now))

        try:
            db.add(session)
            db.commit()
        except Exception:
            db.rollback()
            logger.error(f"Failed to create interview session: user_id={user_id}", exc_info=True)
            raise

        logger.info(f"Interview started: session_id={session.id}, user_id={user_id}, mode={mode.value}")
        log_activity_best_effort(db, user_id, "interview_started", {
            "session_id": session.id,
            "role": target_role,
            "mode": mode.value,
        })

        return StartResult(
            session_id=session.id,
            current_question=first_question,
            question_number=1,
            total_questions=total_questions(mode),
        )

    # ============================================
    # Lookup
    # ============================================

    def get_session(self, db: Session, session_id: str, user_id: int) -> InterviewSession:
        """
        Fetch a session owned by the user.

        Raises:
            SessionNotFound: unknown id or owned by another user
        """
        session = (
            db.query(InterviewSession)
            .filter(InterviewSession.id == session_id, InterviewSession.user_id == user_id)
            .first()
        )
        if session is None:
            raise SessionNotFound()
        return session

    def list_completed_sessions(self, db: Session, user_id: int, limit: int = 10) -> List[SessionSummary]:
        """Finished sessions of the user, most recently completed first."""
        sessions = (
            db.query(InterviewSession)
            .options(selectinload(InterviewSession.questions))
            .filter(InterviewSession.user_id == user_id, InterviewSession.completed_at.isnot(None))
            .order_by(desc(InterviewSession.completed_at))
            .limit(limit)
            .all()
        )
        summaries = []
        for session in sessions:
            duration = None
            if session.completed_at and session.started_at:
                duration = round((session.completed_at - session.started_at).total_seconds() / 60)
            summaries.append(SessionSummary(
                id=session.id,
                target_role=session.target_role,
                mode=InterviewMode(session.mode).value,
                overall_score=session.overall_score,
                question_count=len(session.questions),
                started_at=session.started_at,
                completed_at=session.completed_at,
                duration_minutes=duration,
            ))
        return summaries

    def _load_open_session(self, db: Session, session_id: str, user_id: int) -> _OpenSession:
        """
        Read the session and end the read transaction, so no connection sits
        idle in a transaction while the AI calls run. The later write is
        guarded by the answer_count compare-and-swap.
        """
        try:
            session = self.get_session(db, session_id, user_id)
            if session.is_complete:
                raise InvalidSessionState("Interview session is already complete")
            if len(session.questions) <= session.answer_count:
                raise InvalidSessionState("Interview session has no pending question")
            snapshot = _OpenSession(
                id=session.id,
                user_id=session.user_id,
                mode=InterviewMode(session.mode),
                target_role=session.target_role,
                answer_count=session.answer_count,
                total_questions=session.total_questions,
                pending_question=session.questions[session.answer_count].question,
                turns=tuple(
                    (q.question, a.answer, a.score) for q, a in zip(session.questions, session.answers)
                ),
            )
        finally:
            db.rollback()
        return snapshot

    # ============================================
    # Answer turns
    # ============================================

    def _plan_turn(self, session: _OpenSession, answer: str) -> _TurnPlan:
        current_index = session.answer_count
        total = session.total_questions
        question = session.pending_question
        evaluation = self._evaluate(session, question, answer)

        turns = list(session.turns)
        turns.append((question, answer, evaluation.score))

        plan = _TurnPlan(
            session_id=session.id,
            user_id=session.user_id,
            expected_count=session.answer_count,
            current_index=current_index,
            answer=answer,
            evaluation=evaluation,
            complete=current_index >= total - 1,
            total=total,
        )

        if plan.complete:
            scores = [score for _, _, score in turns]
            plan.overall_score = compute_overall_score(scores)
            plan.final_feedback = self._closing_feedback(session, plan.overall_score, turns)
        else:
            plan.next_question = self._generate_question(
                build_next_question_prompt(session.mode, session.target_role, turns, current_index + 2, total),
                self.fallbacks.next_question(session.mode, current_index),
                f"session_id={session.id}, question={current_index + 2}",
            )
        return plan

    def _persist_turn(self, db: Session, plan: _TurnPlan, via_voice: bool) -> None:
        """Write the answer, the next question or completion, and bump answer_count atomically."""
        now = self._now()
        values = {InterviewSession.answer_count: plan.expected_count + 1}
        if plan.complete:
            values[InterviewSession.completed_at] = now
            values[InterviewSession.overall_score] = plan.overall_score

        try:
            updated = (
                db.query(InterviewSession)
                .filter(
                    InterviewSession.id == plan.session_id,
                    InterviewSession.answer_count == plan.expected_count,
                    InterviewSession.completed_at.is_(None),
                )
                .update(values, synchronize_session=False)
            )
            if updated != 1:
                raise ConcurrentSubmission("Interview session was updated by another request")

            db.add(InterviewAnswer(
                session_id=plan.session_id,
                question_index=plan.current_index,
                answer=plan.answer,
                score=plan.evaluation.score,
                feedback=plan.evaluation.feedback,
                strengths=list(plan.evaluation.strengths),
                improvements=list(plan.evaluation.improvements),
                via_voice=via_voice,
                answered_at=now,
            ))
            if not plan.complete:
                db.add(InterviewQuestion(
                    session_id=plan.session_id,
                    position=plan.current_index + 1,
                    question=plan.next_question,
                    asked_at=now,
                ))
            db.commit()
        except ConcurrentSubmission:
            db.rollback()
            logger.warning(f"Concurrent answer rejected: session_id={plan.session_id}, expected_count={plan.expected_count}")
            raise
        except IntegrityError as e:
            db.rollback()
            logger.warning(f"Concurrent answer rejected by constraint: session_id={plan.session_id}")
            raise ConcurrentSubmission("Interview session was updated by another request") from e
        except Exception:
            db.rollback()
            logger.error(f"Failed to persist interview turn: session_id={plan.session_id}", exc_info=True)
            raise

        if plan.complete:
            logger.info(f"Interview completed: session_id={plan.session_id}, overall_score={plan.overall_score}")
            log_activity_best_effort(db, plan.user_id, "interview_completed", {
                "session_id": plan.session_id,
                "overall_score": plan.overall_score,
            })
        else:
            logger.info(f"Interview turn recorded: session_id={plan.session_id}, answered={plan.expected_count + 1}")

    def submit_answer(self, db: Session, session_id: str, user_id: int, answer: str) -> TurnResult:
        """
        Score a typed answer to the pending question and advance the session.

        Raises:
            InvalidInput: blank answer
            SessionNotFound: unknown session or not owned by the user
            InvalidSessionState: session already complete
            ConcurrentSubmission: another answer landed first
        """
        answer = (answer or "").strip()
        if not answer:
            raise InvalidInput("Answer text is required")

        session = self._load_open_session(db, session_id, user_id)
        plan = self._plan_turn(session, answer)
        self._persist_turn(db, plan, via_voice=False)
        return plan.to_result()

    def submit_voice_answer(
        self,
        db: Session,
        session_id: str,
        user_id: int,
        audio: bytes,
        content_type: str,
    ) -> VoiceTurnResult:
        """
        Transcribe a spoken answer, score it, and synthesize the spoken replies.

        Speech is synthesized before the turn is persisted, so a synthesis
        failure leaves the session untouched.

        Raises:
            InvalidInput: non-audio content type, empty audio or empty transcript
            UpstreamUnavailable: transcription or synthesis failed
            plus everything submit_answer raises
        """
        if not (content_type or "").lower().startswith("audio/"):
            raise InvalidInput("Content-Type must be audio/*")
        if not audio:
            raise InvalidInput("Audio body is empty")
        if self.speech is None:
            raise UpstreamUnavailable("Speech service is not configured")

        session = self._load_open_session(db, session_id, user_id)

        transcript = self.speech.transcribe(audio, content_type)
        if not transcript:
            raise InvalidInput("Could not transcribe audio")

        plan = self._plan_turn(session, transcript)

        if plan.complete:
            feedback_audio = self.speech.synthesize(plan.final_feedback)
            next_question_audio = None
        else:
            short_feedback = f"Score {plan.evaluation.score} out of 100. {plan.evaluation.feedback}"
            with ThreadPoolExecutor(max_workers=2) as pool:
                feedback_future = pool.submit(self.speech.synthesize, short_feedback)
                question_future = pool.submit(self.speech.synthesize, plan.next_question)
                feedback_audio = feedback_future.result()
                next_question_audio = question_future.result()

        self._persist_turn(db, plan, via_voice=True)
        return VoiceTurnResult(
            turn=plan.to_result(),
            feedback_audio=feedback_audio,
            next_question_audio=next_question_audio,
        )

    def speak(self, text: str, voice: Optional[str] = None) -> bytes:
        """Synthesize arbitrary interview text, e.g. replaying a question."""
        text = (text or "").strip()
        if not text:
            raise InvalidInput("Text is required")
        if self.speech is None:
            raise UpstreamUnavailable("Speech service is not configured")
        return self.speech.synthesize(text, voice=voice)
