"""
Offer Pydantic schemas
"""
from typing import Optional
from pydantic import BaseModel, Field
from datetime import date, datetime


class OfferCreate(BaseModel):
    """Offer creation schema; offers start as drafts"""
    application_id: int
    salary: int = Field(..., gt=0)
    currency: str = Field("USD", min_length=3, max_length=3)
    bonus: Optional[int] = Field(None, ge=0)
    equity: Optional[str] = Field(None, max_length=100)
    start_date: Optional[date] = None
    expires_on: Optional[date] = None


class OfferUpdate(BaseModel):
    """Edit the terms of a draft offer"""
    salary: Optional[int] = Field(None, gt=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    bonus: Optional[int] = Field(None, ge=0)
    equity: Optional[str] = Field(None, max_length=100)
    start_date: Optional[date] = None
    expires_on: Optional[date] = None


class OfferDecline(BaseModel):
    reason: Optional[str] = Field(None, max_length=255)


class OfferResponse(BaseModel):
    """Offer response schema"""
    id: int
    application_id: int
    salary: int
    currency: str
    bonus: Optional[int]
    equity: Optional[str]
    start_date: Optional[date]
    expires_on: Optional[date]
    status: str
    extended_at: Optional[datetime]
    responded_at: Optional[datetime]
    decline_reason: Optional[str]
    created_at: datetime
    
    class Config:
        from_attributes = True
