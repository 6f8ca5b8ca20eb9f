"""
Interview routes
"""
from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from talentrack.core.database import get_db
from talentrack.core.utils import to_utc_naive
from talentrack.auth.dependencies import get_current_active_user, require_recruiter
from talentrack.models.user import User
from talentrack.models.interview import Interview
from talentrack.interviews import service
from talentrack.interviews.schemas import (
    InterviewCreate,
    InterviewReschedule,
    InterviewCancel,
    InterviewResponse,
    FeedbackCreate,
    FeedbackResponse,
)

router = APIRouter(prefix="/api/v1/interviews", tags=["Interviews"])


@router.post("/", response_model=InterviewResponse, status_code=status.HTTP_201_CREATED)
def schedule_interview(
    interview_data: InterviewCreate,
    current_user: User = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    """Schedule an interview"""
    return service.schedule_interview(db, interview_data, current_user)


@router.get("/", response_model=List[InterviewResponse])
def list_interviews(
    interviewer_id: Optional[int] = None,
    application_id: Optional[int] = None,
    interview_status: Optional[str] = Query(None, alias="status"),
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    mine: bool = False,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """List interviews by schedule; mine=true limits to the caller's interviews"""
    query = db.query(Interview)
    
    if mine:
        interviewer_id = current_user.id
    if interviewer_id is not None:
        query = query.filter(Interview.interviewer_id == interviewer_id)
    if application_id is not None:
        query = query.filter(Interview.application_id == application_id)
    if interview_status:
        query = query.filter(Interview.status == interview_status)
    if start is not None:
        query = query.filter(Interview.scheduled_at >= to_utc_naive(start))
    if end is not None:
        query = query.filter(Interview.scheduled_at < to_utc_naive(end))
    
    return query.order_by(Interview.scheduled_at, Interview.id).offset(skip).limit(limit).all()


@router.get("/{interview_id}", response_model=InterviewResponse)
def get_interview(
    interview_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    return service.get_interview(db, interview_id)


@router.put("/{interview_id}/reschedule", response_model=InterviewResponse)
def reschedule_interview(
    interview_id: int,
    reschedule: InterviewReschedule,
    current_user: User = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    """Move a scheduled interview to a new slot"""
    interview = service.get_interview(db, interview_id)
    return service.reschedule_interview(
        db,
        interview,
        reschedule.scheduled_at,
        current_user,
        duration_minutes=reschedule.duration_minutes,
    )


@router.post("/{interview_id}/cancel", response_model=InterviewResponse)
def cancel_interview(
    interview_id: int,
    cancel: InterviewCancel,
    current_user: User = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    interview = service.get_interview(db, interview_id)
    return service.cancel_interview(db, interview, current_user, reason=cancel.reason)


@router.post("/{interview_id}/no-show", response_model=InterviewResponse)
def mark_no_show(
    interview_id: int,
    current_user: User = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    interview = service.get_interview(db, interview_id)
    return service.mark_no_show(db, interview, current_user)


@router.post("/{interview_id}/feedback", response_model=FeedbackResponse, status_code=status.HTTP_201_CREATED)
def submit_feedback(
    interview_id: int,
    feedback_data: FeedbackCreate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Submit a scorecard for an interview you conducted"""
    interview = service.get_interview(db, interview_id)
    return service.submit_feedback(db, interview, feedback_data, current_user)


@router.get("/{interview_id}/feedback", response_model=List[FeedbackResponse])
def list_feedback(
    interview_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    return service.get_interview(db, interview_id).feedback
