"""
Candidate and interviewer notifications

Messages are queued on Celery; a failure to enqueue is logged and never
fails the request that triggered it.
"""
from typing import Optional

import structlog

from talentrack.core.config import settings
from talentrack.models.application import Application
from talentrack.models.interview import Interview
from talentrack.models.offer import Offer
from talentrack.tasks.notification_tasks import send_email_task

logger = structlog.get_logger()


def _dispatch(to: Optional[str], subject: str, body: str, event: str) -> bool:
    if not to:
        logger.warning("notification_without_recipient", notification=event)
        return False
    try:
        send_email_task.delay(to, subject, body)
    except Exception as e:
        logger.error("notification_enqueue_failed", notification=event, to=to, error=str(e))
        return False
    logger.info("notification_queued", notification=event, to=to)
    return True


def _signature() -> str:
    return f"\n\n-- \nThe {settings.APP_NAME} recruiting team"


def notify_application_received(application: Application) -> bool:
    candidate = application.candidate
    job = application.job
    body = (
        f"Hi {candidate.first_name},\n\n"
        f"Thanks for applying for {job.title}. We have received your application "
        f"and will be in touch about next steps."
        f"{_signature()}"
    )
    return _dispatch(candidate.email, f"Application received: {job.title}", body, "application_received")


def notify_stage_changed(application: Application) -> bool:
    candidate = application.candidate
    job = application.job
    stage_name = application.stage.name if application.stage else "the next step"
    body = (
        f"Hi {candidate.first_name},\n\n"
        f"Your application for {job.title} has moved to: {stage_name}."
        f"{_signature()}"
    )
    return _dispatch(candidate.email, f"Update on your application: {job.title}", body, "stage_changed")


def notify_rejection(application: Application) -> bool:
    candidate = application.candidate
    job = application.job
    body = (
        f"Hi {candidate.first_name},\n\n"
        f"Thank you for your interest in {job.title}. After careful consideration "
        f"we have decided not to move forward with your application."
        f"{_signature()}"
    )
    return _dispatch(candidate.email, f"Your application for {job.title}", body, "application_rejected")


def notify_interview_scheduled(interview: Interview) -> bool:
    application = interview.application
    candidate = application.candidate
    job = application.job
    when = interview.scheduled_at.strftime("%Y-%m-%d %H:%M UTC")
    where = f"\nLocation: {interview.location}" if interview.location else ""
    details = (
        f"{interview.kind.title()} interview for {job.title}\n"
        f"When: {when} ({interview.duration_minutes} minutes){where}"
    )
    
    sent = _dispatch(
        candidate.email,
        f"Interview scheduled: {job.title}",
        f"Hi {candidate.first_name},\n\n{details}{_signature()}",
        "interview_scheduled",
    )
    interviewer = interview.interviewer
    _dispatch(
        interviewer.email if interviewer else None,
        f"Interview with {candidate.full_name}",
        f"You are interviewing {candidate.full_name}.\n\n{details}{_signature()}",
        "interview_assigned",
    )
    return sent


def notify_offer_extended(offer: Offer) -> bool:
    application = offer.application
    candidate = application.candidate
    job = application.job
    expiry = f"\nPlease respond by {offer.expires_on.isoformat()}." if offer.expires_on else ""
    body = (
        f"Hi {candidate.first_name},\n\n"
        f"We are delighted to offer you the position of {job.title} "
        f"with an annual salary of {offer.salary:,} {offer.currency}.{expiry}"
        f"{_signature()}"
    )
    return _dispatch(candidate.email, f"Offer: {job.title}", body, "offer_extended")
