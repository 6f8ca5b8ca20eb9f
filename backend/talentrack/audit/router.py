"""
Audit log routes
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from talentrack.core.database import get_db
from talentrack.auth.dependencies import require_role
from talentrack.models.user import User
from talentrack.models.audit import AuditLog
from talentrack.audit.schemas import AuditLogResponse

router = APIRouter(prefix="/api/v1/audit", tags=["Audit"])


@router.get("/", response_model=List[AuditLogResponse])
def list_audit_logs(
    resource_type: Optional[str] = None,
    resource_id: Optional[int] = None,
    user_id: Optional[int] = None,
    action: Optional[str] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    current_user: User = Depends(require_role("admin")),
    db: Session = Depends(get_db),
):
    """List audit entries, newest first (admin only)"""
    query = db.query(AuditLog)
    
    if resource_type:
        query = query.filter(AuditLog.resource_type == resource_type)
    if resource_id is not None:
        query = query.filter(AuditLog.resource_id == resource_id)
    if user_id is not None:
        query = query.filter(AuditLog.user_id == user_id)
    if action:
        query = query.filter(AuditLog.action == action)
    
    return query.order_by(AuditLog.id.desc()).offset(skip).limit(limit).all()
