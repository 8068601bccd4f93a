"""
Database models module.

This module imports all database models to ensure they are registered with SQLAlchemy's Base.metadata
before table creation.
"""
from app.db.models.user import User
from app.db.models.profile import UserProfile
from app.db.models.resume import Resume
from app.db.models.activity_log import ActivityLog
from app.db.models.application import Application, ApplicationStatus
from app.db.models.interview_session import (
    InterviewSession,
    InterviewQuestion,
    InterviewAnswer,
    InterviewMode,
)

__all__ = [
    "User",
    "UserProfile",
    "Resume",
    "ActivityLog",
    "Application",
    "ApplicationStatus",
    "InterviewSession",
    "InterviewQuestion",
    "InterviewAnswer",
    "InterviewMode",
]
