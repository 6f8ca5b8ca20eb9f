"""
Audit log Pydantic schemas
"""
from typing import Optional, Dict, Any
from pydantic import BaseModel
from datetime import datetime


class AuditLogResponse(BaseModel):
    """Audit log entry"""
    id: int
    user_id: Optional[int]
    action: str
    resource_type: str
    resource_id: Optional[int]
    details: Optional[Dict[str, Any]]
    ip_address: Optional[str]
    correlation_id: Optional[str]
    created_at: datetime
    
    class Config:
        from_attributes = True
