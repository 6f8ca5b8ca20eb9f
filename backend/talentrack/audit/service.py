"""
Audit trail recording
"""
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session
import structlog

from talentrack.models.audit import AuditLog
from talentrack.models.user import User

logger = structlog.get_logger()


def record_audit(
    db: Session,
    action: str,
    resource_type: str,
    resource_id: Optional[int] = None,
    user: Optional[User] = None,
    details: Optional[Dict[str, Any]] = None,
) -> AuditLog:
    """
    Add an audit entry to the current transaction.
    The caller commits; request metadata comes from the logging context
    bound by CorrelationIDMiddleware.
    """
    context = structlog.contextvars.get_contextvars()
    entry = AuditLog(
        user_id=user.id if user is not None else None,
        action=action,
        resource_type=resource_type,
        resource_id=resource_id,
        details=details or {},
        ip_address=context.get("client_ip"),
        user_agent=(context.get("user_agent") or "")[:500] or None,
        correlation_id=context.get("correlation_id"),
    )
    db.add(entry)
    logger.debug(
        "audit_recorded",
        action=action,
        resource_type=resource_type,
        resource_id=resource_id,
        user_id=entry.user_id,
    )
    return entry
