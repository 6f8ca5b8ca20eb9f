"""
Interview Pydantic schemas
"""
from typing import Optional, Literal
from pydantic import BaseModel, Field
from datetime import datetime


InterviewKind = Literal["phone", "video", "onsite", "technical"]
Recommendation = Literal["strong_no", "no", "yes", "strong_yes"]


class InterviewCreate(BaseModel):
    """Interview scheduling request"""
    application_id: int
    interviewer_id: int
    kind: InterviewKind = "video"
    scheduled_at: datetime
    duration_minutes: int = Field(60, ge=15)
    location: Optional[str] = Field(None, max_length=500)


class InterviewReschedule(BaseModel):
    """Move an interview to a new slot"""
    scheduled_at: datetime
    duration_minutes: Optional[int] = Field(None, ge=15)


class InterviewCancel(BaseModel):
    reason: Optional[str] = Field(None, max_length=255)


class InterviewResponse(BaseModel):
    """Interview response schema"""
    id: int
    application_id: int
    interviewer_id: int
    kind: str
    scheduled_at: datetime
    ends_at: datetime
    duration_minutes: int
    location: Optional[str]
    status: str
    cancel_reason: Optional[str]
    created_at: datetime
    
    class Config:
        from_attributes = True


class FeedbackCreate(BaseModel):
    """Interview scorecard submission"""
    rating: int = Field(..., ge=1, le=5)
    recommendation: Recommendation
    strengths: Optional[str] = None
    concerns: Optional[str] = None


class FeedbackResponse(BaseModel):
    """Interview scorecard"""
    id: int
    interview_id: int
    reviewer_id: int
    rating: int
    recommendation: str
    strengths: Optional[str]
    concerns: Optional[str]
    submitted_at: datetime
    
    class Config:
        from_attributes = True
