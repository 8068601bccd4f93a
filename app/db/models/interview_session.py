"""
Mock interview session models.

A session owns an append-only list of questions and an append-only list of
answers; answers[i] always answers questions[i]. `answer_count` mirrors
len(answers) and is the compare-and-swap guard for turn writes.
"""
import enum
from typing import Dict
from sqlalchemy import (
    Column, Integer, String, ForeignKey, Text, DateTime, Boolean, JSON, Enum, Index, UniqueConstraint
)
from sqlalchemy.orm import relationship
from app.db.base import Base


class InterviewMode(str, enum.Enum):
    """Interview flavours."""
    HR = "hr"
    TECHNICAL = "technical"
    BEHAVIORAL = "behavioral"


QUESTIONS_PER_MODE: Dict[InterviewMode, int] = {
    InterviewMode.TECHNICAL: 8,
    InterviewMode.BEHAVIORAL: 5,
    InterviewMode.HR: 6,
}


def total_questions(mode) -> int:
    """Number of questions a session of this mode runs for."""
    return QUESTIONS_PER_MODE[InterviewMode(mode)]


class InterviewSession(Base):
    __tablename__ = "interview_sessions"

    id = Column(String(32), primary_key=True)  # uuid4 hex
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    target_role = Column(String, nullable=False)
    mode = Column(Enum(InterviewMode), nullable=False)
    settings = Column(JSON, nullable=False, default=dict)  # {"voice_enabled": bool, "video_enabled": bool}
    answer_count = Column(Integer, nullable=False, default=0)
    overall_score = Column(Integer, nullable=True)
    started_at = Column(DateTime(timezone=True), nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True, index=True)

    questions = relationship(
        "InterviewQuestion",
        order_by="InterviewQuestion.position",
        cascade="all, delete-orphan",
        back_populates="session",
    )
    answers = relationship(
        "InterviewAnswer",
        order_by="InterviewAnswer.question_index",
        cascade="all, delete-orphan",
        back_populates="session",
    )

    __table_args__ = (
        Index('idx_interview_user_completed', 'user_id', 'completed_at'),
    )

    @property
    def total_questions(self) -> int:
        return total_questions(self.mode)

    @property
    def is_complete(self) -> bool:
        return self.completed_at is not None or self.answer_count >= self.total_questions

    def __repr__(self):
        return f"<InterviewSession(id='{self.id}', user_id={self.user_id}, mode='{self.mode}', answers={self.answer_count})>"


class InterviewQuestion(Base):
    __tablename__ = "interview_questions"

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(String(32), ForeignKey("interview_sessions.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False)  # 0-based
    question = Column(Text, nullable=False)
    asked_at = Column(DateTime(timezone=True), nullable=False)

    session = relationship("InterviewSession", back_populates="questions")

    __table_args__ = (
        UniqueConstraint('session_id', 'position', name='uq_question_session_position'),
    )


class InterviewAnswer(Base):
    __tablename__ = "interview_answers"

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(String(32), ForeignKey("interview_sessions.id"), nullable=False, index=True)
    question_index = Column(Integer, nullable=False)
    answer = Column(Text, nullable=False)  # typed answer or voice transcript
    score = Column(Integer, nullable=False)
    feedback = Column(Text, nullable=False)
    strengths = Column(JSON, nullable=False, default=list)
    improvements = Column(JSON, nullable=False, default=list)
    via_voice = Column(Boolean, nullable=False, default=False)
    answered_at = Column(DateTime(timezone=True), nullable=False)

    session = relationship("InterviewSession", back_populates="answers")

    __table_args__ = (
        UniqueConstraint('session_id', 'question_index', name='uq_answer_session_index'),
    )
