"""
Tests for the static fallback content bank.
"""
import json

import pytest

from app.db.models.interview_session import InterviewMode
from app.services.interview_fallbacks import load_fallback_bank


def test_bank_covers_every_mode(fallbacks):
    for mode in InterviewMode:
        assert fallbacks.first_question(mode, "Engineer")
        assert len(fallbacks.next_questions[mode]) == 4


def test_first_question_is_parameterized_by_role(fallbacks):
    assert fallbacks.first_question(InterviewMode.HR, "Data Analyst") == (
        "Tell me about yourself and why you're interested in the Data Analyst role."
    )
    assert "Site Reliability Engineer" in fallbacks.first_question("technical", "Site Reliability Engineer")
    assert fallbacks.first_question("behavioral", "Designer") == (
        "Tell me about a time when you had to overcome a significant challenge in your work as a developer."
    )


def test_follow_up_questions_are_fixed_text(fallbacks):
    assert fallbacks.next_questions[InterviewMode.TECHNICAL] == (
        "Explain your approach to system design",
        "How do you handle scalability?",
        "Describe your testing strategy",
        "What's your experience with CI/CD?",
    )
    assert fallbacks.next_questions[InterviewMode.BEHAVIORAL] == (
        "Tell me about a conflict you resolved",
        "Describe a leadership experience",
        "How do you handle pressure?",
        "Share a failure and lesson learned",
    )


def test_next_question_cycles(fallbacks):
    behavioral = fallbacks.next_questions[InterviewMode.BEHAVIORAL]

    assert [fallbacks.next_question("behavioral", i) for i in range(4)] == list(behavioral)
    assert fallbacks.next_question("behavioral", 4) == behavioral[0]
    assert fallbacks.next_question("behavioral", 9) == behavioral[1]


def test_neutral_evaluation(fallbacks):
    assert fallbacks.evaluation.score == 75
    assert len(fallbacks.evaluation.strengths) == 2
    assert len(fallbacks.evaluation.improvements) == 2


def test_closing_template(fallbacks):
    text = fallbacks.closing(81, InterviewMode.HR)
    assert "81/100" in text
    assert "hr interview" in text


def test_bank_is_read_only(fallbacks):
    with pytest.raises(TypeError):
        fallbacks.next_questions[InterviewMode.HR] = ("Replaced?",)


def test_missing_mode_is_rejected(tmp_path):
    raw = {
        "first_questions": {"hr": "Hi {target_role}", "technical": "Tech {target_role}"},
        "next_questions": {"hr": ["A?"], "technical": ["B?"], "behavioral": ["C?"]},
        "evaluation": {"score": 75, "feedback": "Fine."},
        "closing_feedback": "{overall_score} {mode}",
    }
    path = tmp_path / "fallbacks.json"
    path.write_text(json.dumps(raw), encoding="utf-8")

    with pytest.raises(ValueError, match="behavioral"):
        load_fallback_bank(path)
