"""
Candidate Pydantic schemas
"""
from typing import Optional, List
from pydantic import BaseModel, EmailStr, Field
from datetime import datetime


class CandidateCreate(BaseModel):
    """Candidate creation schema"""
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: Optional[str] = None
    location: Optional[str] = None
    headline: Optional[str] = None
    linkedin_url: Optional[str] = None
    portfolio_url: Optional[str] = None
    resume_url: Optional[str] = None
    source: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    notes: Optional[str] = None


class CandidateUpdate(BaseModel):
    """Candidate update schema"""
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    headline: Optional[str] = None
    linkedin_url: Optional[str] = None
    portfolio_url: Optional[str] = None
    resume_url: Optional[str] = None
    source: Optional[str] = None
    tags: Optional[List[str]] = None
    notes: Optional[str] = None


class CandidateResponse(BaseModel):
    """Candidate response schema"""
    id: int
    first_name: str
    last_name: str
    full_name: str
    email: str
    phone: Optional[str]
    location: Optional[str]
    headline: Optional[str]
    linkedin_url: Optional[str]
    portfolio_url: Optional[str]
    resume_url: Optional[str]
    source: Optional[str]
    tags: Optional[List[str]]
    notes: Optional[str]
    created_at: datetime
    
    class Config:
        from_attributes = True
