"""
Pydantic schemas for history/activity endpoints.
"""
from typing import Optional, Dict, Any
from datetime import datetime
from pydantic import BaseModel, Field


class HistoryEntryResponse(BaseModel):
    """Schema for a single history entry."""
    id: int = Field(..., description="History entry ID")
    type: str = Field(..., description="Activity type (interview_started, interview_completed, resume_uploaded, profile_updated, application_created, application_status_changed)")
    created_at: datetime = Field(..., description="When this action occurred")
    meta: Dict[str, Any] = Field(default_factory=dict, description="Type-specific details")

    class Config:
        from_attributes = True
        json_schema_extra = {
            "example": {
                "id": 1,
                "type": "interview_completed",
                "created_at": "2026-01-15T10:30:00Z",
                "meta": {"session_id": "4f1c...", "overall_score": 78}
            }
        }


class HistoryListResponse(BaseModel):
    """Schema for history list response."""
    entries: list[HistoryEntryResponse] = Field(..., description="List of history entries")
    total: int = Field(..., description="Total number of entries")
    page: int = Field(1, description="Current page number")
    page_size: int = Field(20, description="Number of items per page")
