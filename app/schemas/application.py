"""
Pydantic schemas for job application tracking and the dashboard summary.
"""
from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, Field

from app.db.models.application import ApplicationStatus


class ApplicationCreateRequest(BaseModel):
    company: str = Field(..., min_length=1, max_length=200)
    job_title: str = Field(..., min_length=1, max_length=200)
    location: Optional[str] = Field(None, max_length=200)
    job_url: Optional[str] = Field(None, max_length=2000)
    resume_id: Optional[int] = Field(None, description="One of the caller's resumes")
    cover_letter: Optional[str] = None
    notes: Optional[str] = None
    source: Optional[str] = Field(None, max_length=100, description="Defaults to 'manual'")

    class Config:
        json_schema_extra = {
            "example": {
                "company": "Acme",
                "job_title": "Backend Engineer",
                "location": "Remote",
                "source": "referral"
            }
        }


class ApplicationStatusUpdateRequest(BaseModel):
    status: ApplicationStatus
    notes: Optional[str] = Field(None, description="Defaults to 'Status updated to <status>'")


class TimelineEntry(BaseModel):
    status: ApplicationStatus
    date: datetime
    notes: str


class ApplicationResponse(BaseModel):
    id: int
    company: str
    job_title: str
    location: Optional[str] = None
    job_url: Optional[str] = None
    resume_id: Optional[int] = None
    notes: Optional[str] = None
    source: str
    status: ApplicationStatus
    applied_at: datetime
    last_status_change_at: datetime
    timeline: List[TimelineEntry] = Field(default_factory=list)

    class Config:
        from_attributes = True


class ApplicationListResponse(BaseModel):
    applications: List[ApplicationResponse]
    count: int


class ApplicationFunnel(BaseModel):
    total: int
    in_progress: int
    interviews: int = Field(..., description="Applications currently in status 'interview'")
    offers: int
    response_rate: int = Field(..., description="Percent of applications viewed, interviewing or with an offer")


class PracticeSummary(BaseModel):
    practice_count: int = Field(..., description="Completed mock interviews")
    average_score: int


class RecentActivity(BaseModel):
    id: int
    type: str
    text: str
    created_at: datetime


class DashboardSummaryResponse(BaseModel):
    applications: ApplicationFunnel
    interviews: PracticeSummary
    recent_activity: List[RecentActivity]
