"""
Job requisition service: lifecycle, pipeline stages and pipeline summaries
"""
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session
import structlog

from talentrack.core.cache import get_cache, set_cache, delete_cache, get_cache_key
from talentrack.core.config import settings
from talentrack.core.exceptions import (
    ConflictError,
    NotFoundError,
    StateTransitionError,
    ValidationError,
)
from talentrack.core.utils import utcnow
from talentrack.audit.service import record_audit
from talentrack.jobs.schemas import JobCreate, JobUpdate
from talentrack.models.application import Application, APPLICATION_STATUSES
from talentrack.models.job import Job, PipelineStage
from talentrack.models.user import User

logger = structlog.get_logger()

# Allowed manual status changes; "filled" is only entered once hires reach openings
JOB_TRANSITIONS = {
    "draft": {"open", "closed"},
    "open": {"on_hold", "closed"},
    "on_hold": {"open", "closed"},
    "filled": {"open", "closed"},
    "closed": {"open"},
}

REQUIRED_JOB_FIELDS = ("title", "openings", "remote_allowed", "currency")


def pipeline_cache_key(job_id: int) -> str:
    return get_cache_key("pipeline", job_id)


def invalidate_pipeline(job_id: int) -> None:
    """Drop the cached pipeline summary of a job"""
    delete_cache(pipeline_cache_key(job_id))


def _validate_stage_names(names: List[str]) -> List[str]:
    cleaned = [name.strip() for name in names]
    if not cleaned:
        raise ValidationError("A pipeline needs at least one stage")
    if any(not name for name in cleaned):
        raise ValidationError("Stage names cannot be empty")
    lowered = [name.lower() for name in cleaned]
    duplicates = sorted({name for name in lowered if lowered.count(name) > 1})
    if duplicates:
        raise ValidationError("Stage names must be unique", details={"duplicates": duplicates})
    return cleaned


def _validate_salary(salary_min: Optional[int], salary_max: Optional[int]) -> None:
    if salary_min is not None and salary_max is not None and salary_min > salary_max:
        raise ValidationError(
            "salary_min cannot exceed salary_max",
            details={"salary_min": salary_min, "salary_max": salary_max},
        )


def _ensure_user_exists(db: Session, user_id: Optional[int]) -> None:
    if user_id is not None and db.query(User.id).filter(User.id == user_id).first() is None:
        raise NotFoundError("User", str(user_id))


def _repack(stages: List[PipelineStage]) -> None:
    for index, stage in enumerate(stages):
        stage.position = index


def get_job(db: Session, job_id: int) -> Job:
    job = db.query(Job).filter(Job.id == job_id).first()
    if not job:
        raise NotFoundError("Job", str(job_id))
    return job


def get_stage(job: Job, stage_id: int) -> PipelineStage:
    for stage in job.stages:
        if stage.id == stage_id:
            return stage
    raise NotFoundError("Stage", str(stage_id))


def create_job(db: Session, job_data: JobCreate, actor: User) -> Job:
    """Create a job in draft status with its pipeline stages"""
    stage_names = _validate_stage_names(
        job_data.stages if job_data.stages is not None else settings.DEFAULT_PIPELINE_STAGES
    )
    _validate_salary(job_data.salary_min, job_data.salary_max)
    _ensure_user_exists(db, job_data.hiring_manager_id)
    
    job = Job(
        title=job_data.title,
        department=job_data.department,
        location=job_data.location,
        employment_type=job_data.employment_type,
        remote_allowed=job_data.remote_allowed,
        description=job_data.description,
        requirements=job_data.requirements,
        salary_min=job_data.salary_min,
        salary_max=job_data.salary_max,
        currency=job_data.currency.upper(),
        openings=job_data.openings,
        status="draft",
        hiring_manager_id=job_data.hiring_manager_id,
        created_by=actor.id,
    )
    job.stages = [PipelineStage(name=name, position=index) for index, name in enumerate(stage_names)]
    
    db.add(job)
    db.flush()
    record_audit(db, "create", "job", job.id, user=actor, details={"title": job.title, "stages": stage_names})
    db.commit()
    db.refresh(job)
    
    logger.info("job_created", job_id=job.id, title=job.title, stages=len(stage_names))
    return job


def update_job(db: Session, job: Job, job_data: JobUpdate, actor: User) -> Job:
    """Apply a partial update to a job's descriptive fields"""
    changes = job_data.model_dump(exclude_unset=True)
    # Required columns keep their value when sent as null
    changes = {
        field: value for field, value in changes.items()
        if value is not None or field not in REQUIRED_JOB_FIELDS
    }
    if "currency" in changes and changes["currency"]:
        changes["currency"] = changes["currency"].upper()
    
    _validate_salary(
        changes.get("salary_min", job.salary_min),
        changes.get("salary_max", job.salary_max),
    )
    if "hiring_manager_id" in changes:
        _ensure_user_exists(db, changes["hiring_manager_id"])
    
    for field, value in changes.items():
        setattr(job, field, value)
    
    record_audit(db, "update", "job", job.id, user=actor, details={"fields": sorted(changes)})
    db.commit()
    db.refresh(job)
    
    logger.info("job_updated", job_id=job.id, fields=sorted(changes))
    return job


def change_job_status(db: Session, job: Job, new_status: str, actor: User) -> Job:
    """Move a job through its lifecycle"""
    current = job.status
    if new_status not in JOB_TRANSITIONS.get(current, set()):
        raise StateTransitionError("job", current, new_status)
    
    now = utcnow()
    job.status = new_status
    if new_status == "open":
        job.opened_at = now
        job.closed_at = None
    elif new_status == "closed":
        job.closed_at = now
    
    record_audit(db, "status_change", "job", job.id, user=actor, details={"from": current, "to": new_status})
    db.commit()
    db.refresh(job)
    invalidate_pipeline(job.id)
    
    logger.info("job_status_changed", job_id=job.id, from_status=current, to_status=new_status)
    return job


def mark_filled_if_complete(job: Job) -> bool:
    """
    Flip an open job to filled once hires reach its openings.
    Runs inside the caller's transaction; returns True when the status changed.
    """
    if job.status not in ("open", "on_hold"):
        return False
    hired = sum(1 for application in job.applications if application.status == "hired")
    if hired < job.openings:
        return False
    job.status = "filled"
    job.closed_at = utcnow()
    logger.info("job_filled", job_id=job.id, hired=hired, openings=job.openings)
    return True


def delete_job(db: Session, job: Job, actor: User) -> None:
    job_id = job.id
    record_audit(db, "delete", "job", job_id, user=actor, details={"title": job.title})
    db.delete(job)
    db.commit()
    invalidate_pipeline(job_id)
    logger.info("job_deleted", job_id=job_id)


def add_stage(db: Session, job: Job, name: str, actor: User, position: Optional[int] = None) -> PipelineStage:
    """Insert a stage, shifting later stages down"""
    name = name.strip()
    _validate_stage_names([stage.name for stage in job.stages] + [name])
    
    stages = list(job.stages)
    if position is None or position > len(stages):
        position = len(stages)
    stage = PipelineStage(name=name, position=position)
    stages.insert(position, stage)
    _repack(stages)
    job.stages = stages
    
    db.flush()
    record_audit(db, "add_stage", "job", job.id, user=actor, details={"stage": name, "position": position})
    db.commit()
    db.refresh(job)
    invalidate_pipeline(job.id)
    
    logger.info("stage_added", job_id=job.id, stage_id=stage.id, position=position)
    return stage


def rename_stage(db: Session, job: Job, stage_id: int, name: str, actor: User) -> PipelineStage:
    stage = get_stage(job, stage_id)
    name = name.strip()
    _validate_stage_names([s.name for s in job.stages if s.id != stage_id] + [name])
    
    old_name = stage.name
    stage.name = name
    record_audit(db, "rename_stage", "job", job.id, user=actor, details={"from": old_name, "to": name})
    db.commit()
    invalidate_pipeline(job.id)
    
    logger.info("stage_renamed", job_id=job.id, stage_id=stage_id, from_name=old_name, to_name=name)
    return stage


def reorder_stages(db: Session, job: Job, stage_ids: List[int], actor: User) -> Job:
    """Reorder stages; stage_ids must list every stage of the job exactly once"""
    by_id = {stage.id: stage for stage in job.stages}
    if len(stage_ids) != len(by_id) or set(stage_ids) != set(by_id):
        raise ValidationError(
            "stage_ids must contain every stage of the job exactly once",
            details={"expected": sorted(by_id), "received": stage_ids},
        )
    
    _repack([by_id[stage_id] for stage_id in stage_ids])
    record_audit(db, "reorder_stages", "job", job.id, user=actor, details={"stage_ids": stage_ids})
    db.commit()
    db.refresh(job)
    invalidate_pipeline(job.id)
    
    logger.info("stages_reordered", job_id=job.id)
    return job


def delete_stage(db: Session, job: Job, stage_id: int, actor: User) -> None:
    stage = get_stage(job, stage_id)
    if len(job.stages) == 1:
        raise ConflictError("Cannot delete the only stage of a pipeline")
    active = sum(1 for application in stage.applications if application.status == "active")
    if active:
        raise ConflictError(
            "Stage still holds active applications",
            details={"stage_id": stage_id, "active_applications": active},
        )
    
    stages = [s for s in job.stages if s.id != stage_id]
    job.stages = stages
    _repack(stages)
    
    record_audit(db, "delete_stage", "job", job.id, user=actor, details={"stage": stage.name})
    db.commit()
    db.refresh(job)
    invalidate_pipeline(job.id)
    
    logger.info("stage_deleted", job_id=job.id, stage_id=stage_id)


def pipeline_summary(db: Session, job: Job) -> Dict[str, Any]:
    """Active counts per stage plus totals per status, cached in redis"""
    key = pipeline_cache_key(job.id)
    cached = get_cache(key)
    if cached is not None:
        return cached
    
    stage_counts = dict(
        db.query(Application.stage_id, func.count(Application.id))
        .filter(Application.job_id == job.id, Application.status == "active")
        .group_by(Application.stage_id)
        .all()
    )
    status_counts = dict(
        db.query(Application.status, func.count(Application.id))
        .filter(Application.job_id == job.id)
        .group_by(Application.status)
        .all()
    )
    
    summary = {
        "job_id": job.id,
        "stages": [
            {
                "stage_id": stage.id,
                "name": stage.name,
                "position": stage.position,
                "count": stage_counts.get(stage.id, 0),
            }
            for stage in job.stages
        ],
        "status_counts": {status: status_counts.get(status, 0) for status in APPLICATION_STATUSES},
        "total": sum(status_counts.values()),
    }
    set_cache(key, summary)
    return summary
