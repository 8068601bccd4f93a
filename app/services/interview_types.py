"""
Value types passed between the interview engine, its prompts and the routes.
"""
import math
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, List, Dict, Any


def clamp_score(value: Any) -> int:
    """Coerce a model-provided score to an int in [0, 100]."""
    if isinstance(value, bool):
        raise ValueError("score must be a number")
    if isinstance(value, str):
        value = value.strip().removesuffix("/100").strip()
    number = float(value)
    if not math.isfinite(number):
        raise ValueError("score must be a finite number")
    number = max(0.0, min(100.0, number))
    return int(Decimal(number).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _string_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value.strip()] if value.strip() else []
    return [str(item).strip() for item in value if str(item).strip()]


@dataclass(frozen=True)
class CandidateContext:
    """Optional background about the candidate fed into the first question prompt."""
    headline: Optional[str] = None
    skills: List[str] = field(default_factory=list)
    experience_years: Optional[int] = None
    resume_excerpt: Optional[str] = None
    has_profile: bool = False


@dataclass(frozen=True)
class AnswerEvaluation:
    score: int
    feedback: str
    strengths: List[str] = field(default_factory=list)
    improvements: List[str] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "AnswerEvaluation":
        """
        Build an evaluation from the JSON the AI gateway returned.

        Raises:
            ValueError: if the score is missing/non-numeric or feedback is empty
        """
        if "score" not in payload:
            raise ValueError("evaluation has no score")
        feedback = str(payload.get("feedback") or "").strip()
        if not feedback:
            raise ValueError("evaluation has no feedback")
        return cls(
            score=clamp_score(payload["score"]),
            feedback=feedback,
            strengths=_string_list(payload.get("strengths")),
            improvements=_string_list(payload.get("improvements")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "feedback": self.feedback,
            "strengths": list(self.strengths),
            "improvements": list(self.improvements),
        }


@dataclass
class StartResult:
    session_id: str
    current_question: str
    question_number: int
    total_questions: int


@dataclass
class TurnResult:
    """Outcome of one submitted answer; `complete` selects which fields are set."""
    session_id: str
    complete: bool
    evaluation: AnswerEvaluation
    total_questions: int
    answer: str
    next_question: Optional[str] = None
    question_number: Optional[int] = None
    overall_score: Optional[int] = None
    final_feedback: Optional[str] = None
    questions_asked: Optional[int] = None


@dataclass
class VoiceTurnResult:
    turn: TurnResult
    feedback_audio: bytes
    next_question_audio: Optional[bytes] = None


@dataclass
class SessionSummary:
    id: str
    target_role: str
    mode: str
    overall_score: Optional[int]
    question_count: int
    started_at: datetime
    completed_at: Optional[datetime]
    duration_minutes: Optional[int]
