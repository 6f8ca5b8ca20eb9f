"""
Candidate routes
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import or_
from sqlalchemy.orm import Session
import structlog

from talentrack.core.database import get_db
from talentrack.core.exceptions import ConflictError, NotFoundError
from talentrack.auth.dependencies import get_current_active_user, require_recruiter
from talentrack.audit.service import record_audit
from talentrack.jobs.service import invalidate_pipeline
from talentrack.models.user import User
from talentrack.models.candidate import Candidate
from talentrack.models.application import Application
from talentrack.candidates.schemas import CandidateCreate, CandidateUpdate, CandidateResponse
from talentrack.applications.schemas import ApplicationResponse

router = APIRouter(prefix="/api/v1/candidates", tags=["Candidates"])
logger = structlog.get_logger()


def _get_candidate(db: Session, candidate_id: int) -> Candidate:
    candidate = db.query(Candidate).filter(Candidate.id == candidate_id).first()
    if not candidate:
        raise NotFoundError("Candidate", str(candidate_id))
    return candidate


def _ensure_email_free(db: Session, email: str, exclude_id: Optional[int] = None) -> None:
    query = db.query(Candidate).filter(Candidate.email == email)
    if exclude_id is not None:
        query = query.filter(Candidate.id != exclude_id)
    existing = query.first()
    if existing:
        raise ConflictError(
            "Candidate with this email already exists",
            details={"email": email, "candidate_id": existing.id},
        )


@router.post("/", response_model=CandidateResponse, status_code=status.HTTP_201_CREATED)
def create_candidate(
    candidate_data: CandidateCreate,
    current_user: User = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    """Create a new candidate"""
    email = candidate_data.email.lower()
    _ensure_email_free(db, email)
    
    candidate = Candidate(
        **candidate_data.model_dump(exclude={"email"}),
        email=email,
        created_by=current_user.id,
    )
    db.add(candidate)
    db.flush()
    record_audit(db, "create", "candidate", candidate.id, user=current_user, details={"email": email})
    db.commit()
    db.refresh(candidate)
    
    logger.info("candidate_created", candidate_id=candidate.id)
    return candidate


@router.get("/", response_model=List[CandidateResponse])
def list_candidates(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    q: Optional[str] = None,
    source: Optional[str] = None,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """List candidates, searching name and email with q"""
    query = db.query(Candidate)
    
    if q:
        pattern = f"%{q}%"
        query = query.filter(
            or_(
                Candidate.first_name.ilike(pattern),
                Candidate.last_name.ilike(pattern),
                Candidate.email.ilike(pattern),
            )
        )
    if source:
        query = query.filter(Candidate.source == source)
    
    return query.order_by(Candidate.created_at.desc(), Candidate.id.desc()).offset(skip).limit(limit).all()


@router.get("/{candidate_id}", response_model=CandidateResponse)
def get_candidate(
    candidate_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Get candidate details"""
    return _get_candidate(db, candidate_id)


@router.put("/{candidate_id}", response_model=CandidateResponse)
def update_candidate(
    candidate_id: int,
    candidate_data: CandidateUpdate,
    current_user: User = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    """Update candidate"""
    candidate = _get_candidate(db, candidate_id)
    changes = candidate_data.model_dump(exclude_unset=True)
    
    if changes.get("email"):
        changes["email"] = changes["email"].lower()
        _ensure_email_free(db, changes["email"], exclude_id=candidate.id)
    
    for field, value in changes.items():
        if value is None and field in ("first_name", "last_name", "email"):
            continue
        setattr(candidate, field, value)
    
    record_audit(db, "update", "candidate", candidate.id, user=current_user, details={"fields": sorted(changes)})
    db.commit()
    db.refresh(candidate)
    
    logger.info("candidate_updated", candidate_id=candidate.id)
    return candidate


@router.delete("/{candidate_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_candidate(
    candidate_id: int,
    current_user: User = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    """Delete candidate together with their applications"""
    candidate = _get_candidate(db, candidate_id)
    
    job_ids = {application.job_id for application in candidate.applications}
    record_audit(db, "delete", "candidate", candidate_id, user=current_user, details={"email": candidate.email})
    db.delete(candidate)
    db.commit()
    
    for job_id in job_ids:
        invalidate_pipeline(job_id)
    
    logger.info("candidate_deleted", candidate_id=candidate_id)


@router.get("/{candidate_id}/applications", response_model=List[ApplicationResponse])
def list_candidate_applications(
    candidate_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """All applications of a candidate"""
    _get_candidate(db, candidate_id)
    return (
        db.query(Application)
        .filter(Application.candidate_id == candidate_id)
        .order_by(Application.id)
        .all()
    )
