"""
Custom exception classes for the application
"""
from typing import Optional, Dict, Any


class TalenTrackException(Exception):
    """Base exception for TalenTrack"""
    
    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class AuthenticationError(TalenTrackException):
    """Authentication related errors"""
    
    def __init__(self, message: str = "Authentication failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=401, details=details)


class AuthorizationError(TalenTrackException):
    """Authorization/permission errors"""
    
    def __init__(self, message: str = "Insufficient permissions", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=403, details=details)


class NotFoundError(TalenTrackException):
    """Resource not found errors"""
    
    def __init__(self, resource: str, identifier: Optional[str] = None):
        message = f"{resource} not found"
        if identifier:
            message += f": {identifier}"
        super().__init__(message, status_code=404, details={"resource": resource})


class ValidationError(TalenTrackException):
    """Validation errors"""
    
    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=422, details=details)


class ConflictError(TalenTrackException):
    """Request conflicts with the current state of a resource"""
    
    def __init__(self, message: str = "Conflict", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=409, details=details)


class StateTransitionError(ConflictError):
    """Illegal lifecycle transition (job status, offer status)"""
    
    def __init__(self, resource: str, current: str, requested: str):
        super().__init__(
            f"Cannot change {resource} from '{current}' to '{requested}'",
            details={"resource": resource, "current": current, "requested": requested},
        )
