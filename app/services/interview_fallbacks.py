"""
Static fallback content for when the AI gateway is unavailable.

Loaded once at startup from app/data/interview_fallbacks.json and kept
read-only for the life of the process.
"""
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Tuple, Union

from app.db.models.interview_session import InterviewMode
from app.services.interview_types import AnswerEvaluation

logger = logging.getLogger(__name__)

DEFAULT_FALLBACKS_PATH = Path(__file__).resolve().parent.parent / "data" / "interview_fallbacks.json"


@dataclass(frozen=True)
class FallbackBank:
    first_questions: Mapping[InterviewMode, str]
    next_questions: Mapping[InterviewMode, Tuple[str, ...]]
    evaluation: AnswerEvaluation
    closing_feedback: str

    def first_question(self, mode: InterviewMode, target_role: str) -> str:
        return self.first_questions[InterviewMode(mode)].format(target_role=target_role)

    def next_question(self, mode: InterviewMode, current_index: int) -> str:
        """Canned follow-up for the turn at current_index; cycles when the list runs out."""
        questions = self.next_questions[InterviewMode(mode)]
        return questions[current_index % len(questions)]

    def closing(self, overall_score: int, mode: InterviewMode) -> str:
        return self.closing_feedback.format(overall_score=overall_score, mode=InterviewMode(mode).value)


def load_fallback_bank(path: Union[str, Path] = DEFAULT_FALLBACKS_PATH) -> FallbackBank:
    """
    Read and validate the fallback file.

    Raises:
        ValueError: if any mode is missing or a question list is empty
    """
    with open(path, encoding="utf-8") as f:
        raw = json.load(f)

    first_questions = {}
    next_questions = {}
    for mode in InterviewMode:
        first = raw.get("first_questions", {}).get(mode.value)
        following = raw.get("next_questions", {}).get(mode.value)
        if not first:
            raise ValueError(f"Fallback file has no first question for mode '{mode.value}'")
        if not following:
            raise ValueError(f"Fallback file has no follow-up questions for mode '{mode.value}'")
        first_questions[mode] = first
        next_questions[mode] = tuple(following)

    bank = FallbackBank(
        first_questions=MappingProxyType(first_questions),
        next_questions=MappingProxyType(next_questions),
        evaluation=AnswerEvaluation.from_payload(raw["evaluation"]),
        closing_feedback=raw["closing_feedback"],
    )
    logger.info(f"Loaded interview fallbacks from {path}")
    return bank
