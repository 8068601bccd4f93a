"""
Pydantic schemas for profile and resume endpoints.
"""
from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, Field


class ProfileUpdateRequest(BaseModel):
    """Fields left out are not changed."""
    headline: Optional[str] = Field(None, max_length=200)
    current_role: Optional[str] = Field(None, max_length=200)
    location: Optional[str] = Field(None, max_length=200)
    skills: Optional[List[str]] = Field(None, description="Skill names")
    experience_years: Optional[int] = Field(None, ge=0, le=70)

    class Config:
        json_schema_extra = {
            "example": {
                "headline": "Backend engineer focused on APIs",
                "skills": ["Python", "PostgreSQL", "FastAPI"],
                "experience_years": 5
            }
        }


class ProfileResponse(BaseModel):
    user_id: int
    headline: Optional[str] = None
    current_role: Optional[str] = None
    location: Optional[str] = None
    skills: List[str] = Field(default_factory=list)
    experience_years: Optional[int] = None

    class Config:
        from_attributes = True


class ResumeCreateRequest(BaseModel):
    text: str = Field(..., min_length=1, description="Plain resume text")
    is_primary: bool = Field(False, description="Use this resume for interview context")


class ResumeResponse(BaseModel):
    id: int
    original_file: Optional[str] = None
    is_primary: bool
    created_at: datetime
    preview: str = Field("", description="First 200 characters of the resume text")

    class Config:
        from_attributes = True


class ResumeListResponse(BaseModel):
    resumes: List[ResumeResponse]
