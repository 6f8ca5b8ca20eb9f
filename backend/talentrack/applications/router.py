"""
Application routes
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from talentrack.core.database import get_db
from talentrack.auth.dependencies import get_current_active_user, require_recruiter
from talentrack.models.user import User
from talentrack.models.application import Application
from talentrack.models.interview import Interview
from talentrack.models.offer import Offer
from talentrack.applications.service import application_service
from talentrack.applications.schemas import (
    ApplicationCreate,
    ApplicationResponse,
    ApplicationDetailResponse,
    ApplicationEventResponse,
    ApplicationClose,
    StageMove,
    NoteCreate,
    NoteResponse,
    Scorecard,
)
from talentrack.interviews.schemas import InterviewResponse
from talentrack.offers.schemas import OfferResponse

router = APIRouter(prefix="/api/v1/applications", tags=["Applications"])


@router.post("/", response_model=ApplicationDetailResponse, status_code=status.HTTP_201_CREATED)
def create_application(
    application_data: ApplicationCreate,
    current_user: User = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    """Apply a candidate to an open job"""
    return application_service.create(
        db,
        candidate_id=application_data.candidate_id,
        job_id=application_data.job_id,
        actor=current_user,
        source=application_data.source,
        cover_letter=application_data.cover_letter,
    )


@router.get("/", response_model=List[ApplicationResponse])
def list_applications(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    job_id: Optional[int] = None,
    candidate_id: Optional[int] = None,
    stage_id: Optional[int] = None,
    application_status: Optional[str] = Query(None, alias="status"),
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """List applications"""
    query = db.query(Application)
    
    if job_id is not None:
        query = query.filter(Application.job_id == job_id)
    if candidate_id is not None:
        query = query.filter(Application.candidate_id == candidate_id)
    if stage_id is not None:
        query = query.filter(Application.stage_id == stage_id)
    if application_status:
        query = query.filter(Application.status == application_status)
    
    return query.order_by(Application.id.desc()).offset(skip).limit(limit).all()


@router.get("/{application_id}", response_model=ApplicationDetailResponse)
def get_application(
    application_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Get application with its history"""
    return application_service.get(db, application_id)


@router.post("/{application_id}/move", response_model=ApplicationDetailResponse)
def move_application(
    application_id: int,
    move: StageMove,
    current_user: User = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    """Move to any stage of the job's pipeline"""
    application = application_service.get(db, application_id)
    return application_service.move(db, application, move.stage_id, current_user, comment=move.comment)


@router.post("/{application_id}/advance", response_model=ApplicationDetailResponse)
def advance_application(
    application_id: int,
    current_user: User = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    """Move to the next stage"""
    application = application_service.get(db, application_id)
    return application_service.advance(db, application, current_user)


@router.post("/{application_id}/reject", response_model=ApplicationDetailResponse)
def reject_application(
    application_id: int,
    close_data: ApplicationClose,
    current_user: User = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    """Reject an active application"""
    application = application_service.get(db, application_id)
    return application_service.reject(db, application, current_user, reason=close_data.reason)


@router.post("/{application_id}/withdraw", response_model=ApplicationDetailResponse)
def withdraw_application(
    application_id: int,
    close_data: ApplicationClose,
    current_user: User = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    """Record that the candidate withdrew"""
    application = application_service.get(db, application_id)
    return application_service.withdraw(db, application, current_user, reason=close_data.reason)


@router.get("/{application_id}/events", response_model=List[ApplicationEventResponse])
def list_events(
    application_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Application history, oldest first"""
    return application_service.get(db, application_id).events


@router.post("/{application_id}/notes", response_model=NoteResponse, status_code=status.HTTP_201_CREATED)
def add_note(
    application_id: int,
    note_data: NoteCreate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Add a note; any team member may comment"""
    application = application_service.get(db, application_id)
    return application_service.add_note(db, application, note_data.body, current_user)


@router.get("/{application_id}/notes", response_model=List[NoteResponse])
def list_notes(
    application_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    return application_service.get(db, application_id).notes


@router.get("/{application_id}/scorecard", response_model=Scorecard)
def get_scorecard(
    application_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Aggregated interview feedback"""
    application = application_service.get(db, application_id)
    return application_service.scorecard(application)


@router.get("/{application_id}/interviews", response_model=List[InterviewResponse])
def list_application_interviews(
    application_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    application_service.get(db, application_id)
    return (
        db.query(Interview)
        .filter(Interview.application_id == application_id)
        .order_by(Interview.scheduled_at)
        .all()
    )


@router.get("/{application_id}/offers", response_model=List[OfferResponse])
def list_application_offers(
    application_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    application_service.get(db, application_id)
    return (
        db.query(Offer)
        .filter(Offer.application_id == application_id)
        .order_by(Offer.id)
        .all()
    )
