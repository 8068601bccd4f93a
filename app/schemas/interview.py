"""
Pydantic schemas for mock interview endpoints.

Interview payloads use camelCase field names on the wire.
"""
from typing import Optional, List, Literal
from datetime import datetime
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from app.db.models.interview_session import InterviewMode


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


# ============================================
# Requests
# ============================================

class InterviewOptions(CamelModel):
    voice_enabled: Optional[bool] = Field(None, description="Client will answer by voice")
    video_enabled: Optional[bool] = Field(None, description="Client records video")


class StartInterviewRequest(CamelModel):
    """Request schema for starting a mock interview."""
    target_role: str = Field(..., min_length=1, max_length=200, description="Job title to interview for")
    mode: InterviewMode = Field(..., description="hr, technical or behavioral")
    options: Optional[InterviewOptions] = None

    class Config:
        json_schema_extra = {
            "example": {
                "targetRole": "Backend Engineer",
                "mode": "technical",
                "options": {"voiceEnabled": False}
            }
        }


class SubmitAnswerRequest(CamelModel):
    """Request schema for a typed answer."""
    session_id: str = Field(..., min_length=1, description="Interview session ID")
    answer: str = Field(..., min_length=1, description="Answer to the current question")


class SpeechRequest(CamelModel):
    text: str = Field(..., min_length=1, max_length=4000, description="Text to speak")
    voice_id: Optional[str] = Field(None, description="Voice override")


# ============================================
# Responses
# ============================================

class StartInterviewResponse(CamelModel):
    session_id: str
    current_question: str
    question_number: int = 1
    total_questions: int


class EvaluationResponse(CamelModel):
    score: int = Field(..., ge=0, le=100)
    feedback: str
    strengths: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)


class AnswerContinueResponse(CamelModel):
    complete: Literal[False] = False
    current_score: int
    feedback: str
    next_question: str
    question_number: int
    total_questions: int
    evaluation: EvaluationResponse


class CompletedSessionResponse(CamelModel):
    id: str
    overall_score: int
    total_questions: int
    feedback: str


class AnswerCompleteResponse(CamelModel):
    complete: Literal[True] = True
    session: CompletedSessionResponse
    evaluation: EvaluationResponse


class SpeechPayload(CamelModel):
    mime: str = "audio/mpeg"
    feedback_base64: str
    next_question_base64: Optional[str] = None


class VoiceAnswerContinueResponse(AnswerContinueResponse):
    transcript: str
    tts: SpeechPayload


class VoiceAnswerCompleteResponse(AnswerCompleteResponse):
    transcript: str
    tts: SpeechPayload


class SpeechResponse(CamelModel):
    mime: str = "audio/mpeg"
    audio_base64: str


class SessionSummaryResponse(CamelModel):
    id: str
    target_role: str
    mode: str
    overall_score: Optional[int] = None
    question_count: int
    started_at: datetime
    completed_at: Optional[datetime] = None
    duration: Optional[str] = Field(None, description="Whole minutes, e.g. '12 min'")


class SessionListResponse(CamelModel):
    sessions: List[SessionSummaryResponse]


class QuestionResponse(CamelModel):
    position: int
    question: str
    asked_at: datetime


class AnswerResponse(CamelModel):
    question_index: int
    answer: str
    score: int
    feedback: str
    strengths: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)
    via_voice: bool = False
    answered_at: datetime


class SessionDetailResponse(CamelModel):
    id: str
    target_role: str
    mode: str
    state: Literal["active", "complete"]
    question_number: int
    total_questions: int
    overall_score: Optional[int] = None
    started_at: datetime
    completed_at: Optional[datetime] = None
    settings: InterviewOptions
    questions: List[QuestionResponse]
    answers: List[AnswerResponse]
