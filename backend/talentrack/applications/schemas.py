"""
Application Pydantic schemas
"""
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field
from datetime import datetime


class ApplicationCreate(BaseModel):
    """Application creation schema"""
    candidate_id: int
    job_id: int
    source: Optional[str] = None
    cover_letter: Optional[str] = None


class StageMove(BaseModel):
    """Move an application to a stage of the same job"""
    stage_id: int
    comment: Optional[str] = None


class ApplicationClose(BaseModel):
    """Reject or withdraw an application"""
    reason: Optional[str] = Field(None, max_length=255)


class ApplicationResponse(BaseModel):
    """Application response schema"""
    id: int
    candidate_id: int
    job_id: int
    stage_id: Optional[int]
    status: str
    source: Optional[str]
    rejection_reason: Optional[str]
    applied_at: datetime
    stage_entered_at: Optional[datetime]
    hired_at: Optional[datetime]
    closed_at: Optional[datetime]
    
    class Config:
        from_attributes = True


class ApplicationEventResponse(BaseModel):
    """Application history entry"""
    id: int
    event_type: str
    from_stage: Optional[str]
    to_stage: Optional[str]
    details: Optional[Dict[str, Any]]
    actor_id: Optional[int]
    created_at: datetime
    
    class Config:
        from_attributes = True


class ApplicationDetailResponse(ApplicationResponse):
    """Application with its stage name and history"""
    cover_letter: Optional[str]
    stage_name: Optional[str] = None
    events: List[ApplicationEventResponse]


class NoteCreate(BaseModel):
    """Note creation schema"""
    body: str = Field(..., min_length=1)


class NoteResponse(BaseModel):
    """Note response schema"""
    id: int
    application_id: int
    author_id: Optional[int]
    body: str
    created_at: datetime
    
    class Config:
        from_attributes = True


class Scorecard(BaseModel):
    """Aggregated interview feedback for an application"""
    application_id: int
    feedback_count: int
    average_rating: Optional[float]
    recommendations: Dict[str, int]
