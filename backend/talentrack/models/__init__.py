"""
Database models
"""
from talentrack.models.user import User, Role, user_roles
from talentrack.models.job import Job, PipelineStage
from talentrack.models.candidate import Candidate
from talentrack.models.application import Application, ApplicationEvent, Note
from talentrack.models.interview import Interview, InterviewFeedback
from talentrack.models.offer import Offer
from talentrack.models.audit import AuditLog

__all__ = [
    "User",
    "Role",
    "user_roles",
    "Job",
    "PipelineStage",
    "Candidate",
    "Application",
    "ApplicationEvent",
    "Note",
    "Interview",
    "InterviewFeedback",
    "Offer",
    "AuditLog",
]
