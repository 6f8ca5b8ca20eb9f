"""
Application service - moves applications through a job's pipeline
"""
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session
import structlog

from talentrack.core.exceptions import ConflictError, NotFoundError, ValidationError
from talentrack.core.utils import utcnow
from talentrack.audit.service import record_audit
from talentrack.jobs.service import get_job, invalidate_pipeline, mark_filled_if_complete
from talentrack.models.application import Application, ApplicationEvent, Note
from talentrack.models.candidate import Candidate
from talentrack.models.interview import RECOMMENDATIONS
from talentrack.models.job import PipelineStage
from talentrack.models.user import User
from talentrack.notifications import service as notifications

logger = structlog.get_logger()


class ApplicationService:
    """Pipeline operations on applications"""
    
    def get(self, db: Session, application_id: int) -> Application:
        application = db.query(Application).filter(Application.id == application_id).first()
        if not application:
            raise NotFoundError("Application", str(application_id))
        return application
    
    def ensure_active(self, application: Application) -> None:
        if not application.is_active:
            raise ConflictError(
                f"Application is {application.status}",
                details={"application_id": application.id, "status": application.status},
            )
    
    def _record_event(
        self,
        application: Application,
        event_type: str,
        actor: Optional[User],
        from_stage: Optional[PipelineStage] = None,
        to_stage: Optional[PipelineStage] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> ApplicationEvent:
        event = ApplicationEvent(
            event_type=event_type,
            from_stage=from_stage.name if from_stage else None,
            to_stage=to_stage.name if to_stage else None,
            details=details or {},
            actor_id=actor.id if actor else None,
        )
        application.events.append(event)
        return event
    
    def create(
        self,
        db: Session,
        candidate_id: int,
        job_id: int,
        actor: User,
        source: Optional[str] = None,
        cover_letter: Optional[str] = None,
    ) -> Application:
        """Apply a candidate to an open job, placing them in the first stage"""
        candidate = db.query(Candidate).filter(Candidate.id == candidate_id).first()
        if not candidate:
            raise NotFoundError("Candidate", str(candidate_id))
        job = get_job(db, job_id)
        
        if job.status != "open":
            raise ValidationError(
                "Job is not accepting applications",
                details={"job_id": job.id, "status": job.status},
            )
        existing = (
            db.query(Application)
            .filter(Application.candidate_id == candidate_id, Application.job_id == job_id)
            .first()
        )
        if existing:
            raise ConflictError(
                "Candidate has already applied to this job",
                details={"application_id": existing.id},
            )
        if not job.stages:
            raise ValidationError("Job has no pipeline stages", details={"job_id": job.id})
        
        first_stage = job.stages[0]
        application = Application(
            candidate=candidate,
            job=job,
            stage=first_stage,
            status="active",
            source=source or candidate.source,
            cover_letter=cover_letter,
            stage_entered_at=utcnow(),
            created_by=actor.id,
        )
        self._record_event(application, "applied", actor, to_stage=first_stage)
        db.add(application)
        db.flush()
        record_audit(
            db, "create", "application", application.id, user=actor,
            details={"candidate_id": candidate_id, "job_id": job_id},
        )
        db.commit()
        db.refresh(application)
        invalidate_pipeline(job.id)
        
        logger.info("application_created", application_id=application.id, candidate_id=candidate_id, job_id=job_id)
        notifications.notify_application_received(application)
        return application
    
    def move(
        self,
        db: Session,
        application: Application,
        stage_id: int,
        actor: User,
        comment: Optional[str] = None,
    ) -> Application:
        """Move an active application to another stage of its job"""
        self.ensure_active(application)
        target = next((stage for stage in application.job.stages if stage.id == stage_id), None)
        if target is None:
            raise ValidationError(
                "Stage does not belong to this job",
                details={"stage_id": stage_id, "job_id": application.job_id},
            )
        if target.id == application.stage_id:
            raise ValidationError("Application is already in this stage", details={"stage_id": stage_id})
        
        return self._transition(db, application, target, actor, comment)
    
    def advance(self, db: Session, application: Application, actor: User) -> Application:
        """Move an active application to the next stage"""
        self.ensure_active(application)
        stages = application.job.stages
        current_position = application.stage.position if application.stage else -1
        following = [stage for stage in stages if stage.position > current_position]
        if not following:
            raise ValidationError("Application is already in the last stage")
        
        return self._transition(db, application, following[0], actor)
    
    def _transition(
        self,
        db: Session,
        application: Application,
        target: PipelineStage,
        actor: User,
        comment: Optional[str] = None,
    ) -> Application:
        previous = application.stage
        application.stage = target
        application.stage_entered_at = utcnow()
        self._record_event(
            application, "stage_changed", actor,
            from_stage=previous, to_stage=target,
            details={"comment": comment} if comment else None,
        )
        record_audit(
            db, "move", "application", application.id, user=actor,
            details={"from": previous.name if previous else None, "to": target.name},
        )
        db.commit()
        db.refresh(application)
        invalidate_pipeline(application.job_id)
        
        logger.info(
            "application_moved",
            application_id=application.id,
            from_stage=previous.name if previous else None,
            to_stage=target.name,
        )
        notifications.notify_stage_changed(application)
        return application
    
    def _close(
        self,
        db: Session,
        application: Application,
        status: str,
        actor: User,
        reason: Optional[str],
    ) -> Application:
        self.ensure_active(application)
        application.status = status
        application.closed_at = utcnow()
        if status == "rejected":
            application.rejection_reason = reason
        self._record_event(
            application, status, actor,
            from_stage=application.stage,
            details={"reason": reason} if reason else None,
        )
        record_audit(db, status, "application", application.id, user=actor, details={"reason": reason})
        db.commit()
        db.refresh(application)
        invalidate_pipeline(application.job_id)
        
        logger.info("application_closed", application_id=application.id, status=status)
        return application
    
    def reject(self, db: Session, application: Application, actor: User, reason: Optional[str] = None) -> Application:
        application = self._close(db, application, "rejected", actor, reason)
        notifications.notify_rejection(application)
        return application
    
    def withdraw(self, db: Session, application: Application, actor: User, reason: Optional[str] = None) -> Application:
        return self._close(db, application, "withdrawn", actor, reason)
    
    def mark_hired(self, application: Application, actor: User) -> None:
        """
        Close an application as hired inside the caller's transaction.
        Moves it to the last stage and may mark the job as filled.
        """
        self.ensure_active(application)
        now = utcnow()
        previous = application.stage
        job = application.job
        last_stage = job.stages[-1] if job.stages else None
        
        application.status = "hired"
        application.hired_at = now
        application.closed_at = now
        if last_stage is not None and last_stage is not previous:
            application.stage = last_stage
            application.stage_entered_at = now
        
        self._record_event(application, "hired", actor, from_stage=previous, to_stage=last_stage)
        mark_filled_if_complete(job)
        logger.info("application_hired", application_id=application.id, job_id=job.id)
    
    def add_note(self, db: Session, application: Application, body: str, author: User) -> Note:
        note = Note(application_id=application.id, author_id=author.id, body=body)
        db.add(note)
        db.flush()
        record_audit(db, "add_note", "application", application.id, user=author, details={"note_id": note.id})
        db.commit()
        db.refresh(note)
        return note
    
    def scorecard(self, application: Application) -> Dict[str, Any]:
        """Aggregate every feedback submitted across the application's interviews"""
        feedback = [entry for interview in application.interviews for entry in interview.feedback]
        recommendations = {value: 0 for value in RECOMMENDATIONS}
        for entry in feedback:
            recommendations[entry.recommendation] = recommendations.get(entry.recommendation, 0) + 1
        
        average = None
        if feedback:
            average = round(sum(entry.rating for entry in feedback) / len(feedback), 2)
        
        return {
            "application_id": application.id,
            "feedback_count": len(feedback),
            "average_rating": average,
            "recommendations": recommendations,
        }


application_service = ApplicationService()
