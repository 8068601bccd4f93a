"""
ActivityLog model: user-facing timeline of notable actions.
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON, Index
from sqlalchemy.sql import func
from app.db.base import Base


class ActivityLog(Base):
    __tablename__ = "activity_logs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    type = Column(String, nullable=False, index=True)  # "interview_started", "interview_completed", "resume_uploaded", "profile_updated"
    meta = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    __table_args__ = (
        Index('idx_activity_user_created', 'user_id', 'created_at'),
    )

    def __repr__(self):
        return f"<ActivityLog(id={self.id}, user_id={self.user_id}, type='{self.type}')>"
