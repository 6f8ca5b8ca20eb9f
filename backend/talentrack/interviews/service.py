"""
Interview scheduling service
"""
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session
import structlog

from talentrack.core.config import settings
from talentrack.core.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from talentrack.core.utils import to_utc_naive
from talentrack.audit.service import record_audit
from talentrack.applications.service import application_service
from talentrack.interviews.schemas import FeedbackCreate, InterviewCreate
from talentrack.models.interview import Interview, InterviewFeedback
from talentrack.models.user import User
from talentrack.notifications import service as notifications

logger = structlog.get_logger()


def get_interview(db: Session, interview_id: int) -> Interview:
    interview = db.query(Interview).filter(Interview.id == interview_id).first()
    if not interview:
        raise NotFoundError("Interview", str(interview_id))
    return interview


def _validate_duration(duration_minutes: int) -> None:
    if duration_minutes > settings.MAX_INTERVIEW_MINUTES:
        raise ValidationError(
            f"Interviews cannot exceed {settings.MAX_INTERVIEW_MINUTES} minutes",
            details={"duration_minutes": duration_minutes},
        )


def find_conflicts(
    db: Session,
    interviewer_id: int,
    start: datetime,
    duration_minutes: int,
    exclude_id: Optional[int] = None,
) -> List[Interview]:
    """
    Scheduled interviews of the interviewer overlapping [start, start + duration).
    Touching windows do not overlap.
    """
    end = start + timedelta(minutes=duration_minutes)
    query = db.query(Interview).filter(
        Interview.interviewer_id == interviewer_id,
        Interview.status == "scheduled",
        Interview.scheduled_at < end,
        # No interview is longer than the configured maximum
        Interview.scheduled_at > start - timedelta(minutes=settings.MAX_INTERVIEW_MINUTES),
    )
    if exclude_id is not None:
        query = query.filter(Interview.id != exclude_id)
    
    return [interview for interview in query.all() if interview.ends_at > start]


def _ensure_no_conflicts(
    db: Session,
    interviewer_id: int,
    start: datetime,
    duration_minutes: int,
    exclude_id: Optional[int] = None,
) -> None:
    conflicts = find_conflicts(db, interviewer_id, start, duration_minutes, exclude_id=exclude_id)
    if conflicts:
        raise ConflictError(
            "Interviewer already has an interview in this slot",
            details={"interviewer_id": interviewer_id, "conflicting_interview_ids": [i.id for i in conflicts]},
        )


def schedule_interview(db: Session, interview_data: InterviewCreate, actor: User) -> Interview:
    """Schedule an interview for an active application"""
    application = application_service.get(db, interview_data.application_id)
    application_service.ensure_active(application)
    
    interviewer = db.query(User).filter(User.id == interview_data.interviewer_id).first()
    if not interviewer:
        raise NotFoundError("User", str(interview_data.interviewer_id))
    if not interviewer.is_active:
        raise ValidationError("Interviewer account is inactive", details={"interviewer_id": interviewer.id})
    
    _validate_duration(interview_data.duration_minutes)
    start = to_utc_naive(interview_data.scheduled_at)
    _ensure_no_conflicts(db, interviewer.id, start, interview_data.duration_minutes)
    
    interview = Interview(
        application_id=application.id,
        interviewer_id=interviewer.id,
        kind=interview_data.kind,
        scheduled_at=start,
        duration_minutes=interview_data.duration_minutes,
        location=interview_data.location,
        status="scheduled",
        created_by=actor.id,
    )
    db.add(interview)
    db.flush()
    record_audit(
        db, "schedule", "interview", interview.id, user=actor,
        details={"application_id": application.id, "interviewer_id": interviewer.id, "scheduled_at": start.isoformat()},
    )
    db.commit()
    db.refresh(interview)
    
    logger.info(
        "interview_scheduled",
        interview_id=interview.id,
        application_id=application.id,
        interviewer_id=interviewer.id,
    )
    notifications.notify_interview_scheduled(interview)
    return interview


def _ensure_scheduled(interview: Interview) -> None:
    if interview.status != "scheduled":
        raise ConflictError(
            f"Interview is {interview.status}",
            details={"interview_id": interview.id, "status": interview.status},
        )


def reschedule_interview(
    db: Session,
    interview: Interview,
    scheduled_at: datetime,
    actor: User,
    duration_minutes: Optional[int] = None,
) -> Interview:
    _ensure_scheduled(interview)
    duration = duration_minutes or interview.duration_minutes
    _validate_duration(duration)
    start = to_utc_naive(scheduled_at)
    _ensure_no_conflicts(db, interview.interviewer_id, start, duration, exclude_id=interview.id)
    
    previous = interview.scheduled_at
    interview.scheduled_at = start
    interview.duration_minutes = duration
    record_audit(
        db, "reschedule", "interview", interview.id, user=actor,
        details={"from": previous.isoformat(), "to": start.isoformat()},
    )
    db.commit()
    db.refresh(interview)
    
    logger.info("interview_rescheduled", interview_id=interview.id)
    notifications.notify_interview_scheduled(interview)
    return interview


def cancel_interview(db: Session, interview: Interview, actor: User, reason: Optional[str] = None) -> Interview:
    _ensure_scheduled(interview)
    interview.status = "cancelled"
    interview.cancel_reason = reason
    record_audit(db, "cancel", "interview", interview.id, user=actor, details={"reason": reason})
    db.commit()
    db.refresh(interview)
    
    logger.info("interview_cancelled", interview_id=interview.id)
    return interview


def mark_no_show(db: Session, interview: Interview, actor: User) -> Interview:
    _ensure_scheduled(interview)
    interview.status = "no_show"
    record_audit(db, "no_show", "interview", interview.id, user=actor)
    db.commit()
    db.refresh(interview)
    
    logger.info("interview_no_show", interview_id=interview.id)
    return interview


def submit_feedback(
    db: Session,
    interview: Interview,
    feedback_data: FeedbackCreate,
    reviewer: User,
) -> InterviewFeedback:
    """Record a scorecard; completes the interview"""
    if reviewer.id != interview.interviewer_id and not reviewer.has_role("admin"):
        raise AuthorizationError(
            "Only the assigned interviewer can submit feedback",
            details={"interview_id": interview.id},
        )
    if interview.status in ("cancelled", "no_show"):
        raise ConflictError(
            f"Cannot submit feedback for a {interview.status} interview",
            details={"interview_id": interview.id, "status": interview.status},
        )
    if any(entry.reviewer_id == reviewer.id for entry in interview.feedback):
        raise ConflictError(
            "Feedback already submitted",
            details={"interview_id": interview.id, "reviewer_id": reviewer.id},
        )
    
    feedback = InterviewFeedback(
        reviewer_id=reviewer.id,
        rating=feedback_data.rating,
        recommendation=feedback_data.recommendation,
        strengths=feedback_data.strengths,
        concerns=feedback_data.concerns,
    )
    interview.feedback.append(feedback)
    interview.status = "completed"
    db.flush()
    record_audit(
        db, "submit_feedback", "interview", interview.id, user=reviewer,
        details={"rating": feedback.rating, "recommendation": feedback.recommendation},
    )
    db.commit()
    db.refresh(feedback)
    
    logger.info("feedback_submitted", interview_id=interview.id, reviewer_id=reviewer.id, rating=feedback.rating)
    return feedback
