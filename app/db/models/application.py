"""
Job application tracking.

`timeline` is an append-only list of {"status", "date", "notes"} entries;
its last entry always matches `status`.
"""
import enum
from sqlalchemy import Column, Integer, String, ForeignKey, Text, DateTime, JSON, Enum, Index
from app.db.base import Base


class ApplicationStatus(str, enum.Enum):
    APPLIED = "applied"
    VIEWED = "viewed"
    INTERVIEW = "interview"
    ASSESSMENT = "assessment"
    OFFER = "offer"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


class Application(Base):
    __tablename__ = "applications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    company = Column(String, nullable=False)
    job_title = Column(String, nullable=False)
    location = Column(String, nullable=True)
    job_url = Column(String, nullable=True)
    resume_id = Column(Integer, ForeignKey("resumes.id"), nullable=True)
    cover_letter = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    source = Column(String, nullable=False, default="manual")
    status = Column(Enum(ApplicationStatus), nullable=False, default=ApplicationStatus.APPLIED)
    timeline = Column(JSON, nullable=False, default=list)
    applied_at = Column(DateTime(timezone=True), nullable=False)
    last_status_change_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index('idx_application_user_status', 'user_id', 'status'),
    )

    def __repr__(self):
        return f"<Application(id={self.id}, user_id={self.user_id}, company='{self.company}', status='{self.status}')>"
