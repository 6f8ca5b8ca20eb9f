"""
Job requisition routes
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
import structlog

from talentrack.core.database import get_db
from talentrack.auth.dependencies import get_current_active_user, require_recruiter, require_role
from talentrack.models.user import User
from talentrack.models.job import Job
from talentrack.models.application import Application
from talentrack.jobs import service
from talentrack.jobs.schemas import (
    JobCreate,
    JobUpdate,
    JobStatusUpdate,
    JobResponse,
    StageCreate,
    StageUpdate,
    StageOrder,
    StageResponse,
    PipelineSummary,
)
from talentrack.applications.schemas import ApplicationResponse

router = APIRouter(prefix="/api/v1/jobs", tags=["Jobs"])
logger = structlog.get_logger()


@router.post("/", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
def create_job(
    job_data: JobCreate,
    current_user: User = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    """Create a new job in draft status"""
    return service.create_job(db, job_data, current_user)


@router.get("/", response_model=List[JobResponse])
def list_jobs(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    job_status: Optional[str] = Query(None, alias="status"),
    department: Optional[str] = None,
    q: Optional[str] = None,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """List jobs"""
    query = db.query(Job)
    
    if job_status:
        query = query.filter(Job.status == job_status)
    if department:
        query = query.filter(Job.department == department)
    if q:
        query = query.filter(Job.title.ilike(f"%{q}%"))
    
    return query.order_by(Job.created_at.desc(), Job.id.desc()).offset(skip).limit(limit).all()


@router.get("/{job_id}", response_model=JobResponse)
def get_job(
    job_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Get job details with its pipeline"""
    return service.get_job(db, job_id)


@router.put("/{job_id}", response_model=JobResponse)
def update_job(
    job_id: int,
    job_data: JobUpdate,
    current_user: User = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    """Update job fields"""
    job = service.get_job(db, job_id)
    return service.update_job(db, job, job_data, current_user)


@router.delete("/{job_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_job(
    job_id: int,
    current_user: User = Depends(require_role("admin")),
    db: Session = Depends(get_db),
):
    """Delete a job and everything attached to it (admin only)"""
    job = service.get_job(db, job_id)
    service.delete_job(db, job, current_user)


@router.post("/{job_id}/status", response_model=JobResponse)
def change_job_status(
    job_id: int,
    status_data: JobStatusUpdate,
    current_user: User = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    """Open, pause, close or reopen a job"""
    job = service.get_job(db, job_id)
    return service.change_job_status(db, job, status_data.status, current_user)


@router.get("/{job_id}/stages", response_model=List[StageResponse])
def list_stages(
    job_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """List pipeline stages in order"""
    return service.get_job(db, job_id).stages


@router.post("/{job_id}/stages", response_model=StageResponse, status_code=status.HTTP_201_CREATED)
def add_stage(
    job_id: int,
    stage_data: StageCreate,
    current_user: User = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    """Add a pipeline stage"""
    job = service.get_job(db, job_id)
    return service.add_stage(db, job, stage_data.name, current_user, position=stage_data.position)


@router.put("/{job_id}/stages/order", response_model=List[StageResponse])
def reorder_stages(
    job_id: int,
    order: StageOrder,
    current_user: User = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    """Reorder pipeline stages"""
    job = service.get_job(db, job_id)
    return service.reorder_stages(db, job, order.stage_ids, current_user).stages


@router.put("/{job_id}/stages/{stage_id}", response_model=StageResponse)
def rename_stage(
    job_id: int,
    stage_id: int,
    stage_data: StageUpdate,
    current_user: User = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    """Rename a pipeline stage"""
    job = service.get_job(db, job_id)
    return service.rename_stage(db, job, stage_id, stage_data.name, current_user)


@router.delete("/{job_id}/stages/{stage_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_stage(
    job_id: int,
    stage_id: int,
    current_user: User = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    """Delete an empty pipeline stage"""
    job = service.get_job(db, job_id)
    service.delete_stage(db, job, stage_id, current_user)


@router.get("/{job_id}/pipeline", response_model=PipelineSummary)
def get_pipeline(
    job_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Pipeline snapshot: active applications per stage and totals per status"""
    job = service.get_job(db, job_id)
    return service.pipeline_summary(db, job)


@router.get("/{job_id}/applications", response_model=List[ApplicationResponse])
def list_job_applications(
    job_id: int,
    stage_id: Optional[int] = None,
    application_status: Optional[str] = Query(None, alias="status"),
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Applications for a job, oldest first"""
    service.get_job(db, job_id)
    query = db.query(Application).filter(Application.job_id == job_id)
    
    if stage_id is not None:
        query = query.filter(Application.stage_id == stage_id)
    if application_status:
        query = query.filter(Application.status == application_status)
    
    return query.order_by(Application.id).all()
