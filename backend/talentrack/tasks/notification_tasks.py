"""
Email notification tasks
"""
import smtplib
from email.message import EmailMessage

from celery import Task
import structlog

from talentrack.core.celery_app import celery_app
from talentrack.core.config import settings

logger = structlog.get_logger()


def send_email(to: str, subject: str, body: str) -> None:
    """Deliver a plain-text email through the configured SMTP server"""
    message = EmailMessage()
    message["From"] = settings.SMTP_FROM_EMAIL
    message["To"] = to
    message["Subject"] = subject
    message.set_content(body)
    
    with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=30) as smtp:
        if settings.SMTP_USE_TLS:
            smtp.starttls()
        if settings.SMTP_USER and settings.SMTP_PASSWORD:
            smtp.login(settings.SMTP_USER, settings.SMTP_PASSWORD)
        smtp.send_message(message)


@celery_app.task(name="notifications.send_email", bind=True, max_retries=3)
def send_email_task(self: Task, to: str, subject: str, body: str) -> dict:
    """Send one notification email, retrying on SMTP failures"""
    if not settings.SMTP_HOST:
        logger.info("email_skipped", to=to, subject=subject, reason="smtp_not_configured")
        return {"status": "skipped", "to": to}
    
    try:
        send_email(to, subject, body)
    except (smtplib.SMTPException, OSError) as e:
        logger.error("email_send_failed", to=to, subject=subject, error=str(e))
        raise self.retry(exc=e, countdown=60)
    
    logger.info("email_sent", to=to, subject=subject)
    return {"status": "sent", "to": to}
