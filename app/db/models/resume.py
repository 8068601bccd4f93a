from sqlalchemy import Column, Integer, String, ForeignKey, Text, Boolean, DateTime, Index
from sqlalchemy.sql import func
from app.db.base import Base

class Resume(Base):
    __tablename__ = "resumes"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    original_file = Column(String, nullable=True)  # None when pasted as text
    parsed_text = Column(Text, nullable=False)
    is_primary = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        Index('idx_resume_user_primary', 'user_id', 'is_primary'),
    )
