"""
Authentication service layer
"""
import json
from datetime import datetime, timedelta, timezone
from typing import List, Optional
from sqlalchemy.orm import Session
from jose import jwt
from passlib.context import CryptContext
import structlog

from talentrack.core.config import settings
from talentrack.core.exceptions import ConflictError, ValidationError
from talentrack.core.utils import utcnow
from talentrack.models.user import User, Role
from talentrack.audit.service import record_audit

logger = structlog.get_logger()

# Password hashing context
pwd_context = CryptContext(schemes=settings.PASSWORD_HASH_SCHEMES, deprecated="auto")

DEFAULT_ROLES = [
    {
        "name": "admin",
        "description": "System administrator with full access",
        "permissions": ["*"],
    },
    {
        "name": "recruiter",
        "description": "Recruiter managing jobs, candidates, applications and offers",
        "permissions": [
            "jobs:read", "jobs:write",
            "candidates:read", "candidates:write",
            "applications:read", "applications:write",
            "interviews:read", "interviews:write",
            "offers:read", "offers:write",
        ],
    },
    {
        "name": "hiring_manager",
        "description": "Hiring manager with read access to their pipelines",
        "permissions": ["jobs:read", "candidates:read", "applications:read", "interviews:read", "offers:read"],
    },
    {
        "name": "interviewer",
        "description": "Interviewer submitting scorecards",
        "permissions": ["interviews:read", "feedback:write"],
    },
]


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash"""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password"""
    return pwd_context.hash(password)


def _encode_token(data: dict, token_type: str, expires_delta: timedelta) -> str:
    to_encode = data.copy()
    to_encode.update({"exp": datetime.now(timezone.utc) + expires_delta, "type": token_type})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token"""
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return _encode_token(data, "access", expires_delta)


def create_refresh_token(data: dict) -> str:
    """Create JWT refresh token"""
    return _encode_token(data, "refresh", timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS))


def decode_token(token: str) -> dict:
    """Decode and verify a JWT; raises jose.JWTError when invalid or expired"""
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    """Authenticate user with email and password"""
    user = get_user_by_email(db, email)
    if not user:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Get user by email"""
    return db.query(User).filter(User.email == email.lower()).first()


def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
    """Get user by ID"""
    return db.query(User).filter(User.id == user_id).first()


def resolve_roles(db: Session, role_names: List[str]) -> List[Role]:
    """Look up roles by name, rejecting unknown names"""
    roles = db.query(Role).filter(Role.name.in_(role_names)).all()
    missing = sorted(set(role_names) - {role.name for role in roles})
    if missing:
        raise ValidationError("Unknown roles", details={"unknown_roles": missing})
    return roles


def create_user(
    db: Session,
    email: str,
    password: str,
    full_name: Optional[str] = None,
    role_names: Optional[List[str]] = None,
    actor: Optional[User] = None,
) -> User:
    """Create a new user with roles"""
    email = email.lower()
    if get_user_by_email(db, email):
        raise ConflictError(f"User with email {email} already exists", details={"email": email})
    
    user = User(
        email=email,
        hashed_password=get_password_hash(password),
        full_name=full_name,
    )
    
    if role_names:
        user.roles = resolve_roles(db, role_names)
    else:
        default_role = db.query(Role).filter(Role.name == settings.DEFAULT_USER_ROLE).first()
        if default_role:
            user.roles = [default_role]
    
    db.add(user)
    db.flush()
    record_audit(
        db, "create", "user", user.id, user=actor,
        details={"email": email, "roles": user.role_names},
    )
    db.commit()
    db.refresh(user)
    
    logger.info("user_created", user_id=user.id, email=email)
    return user


def update_user(
    db: Session,
    user: User,
    actor: User,
    full_name: Optional[str] = None,
    is_active: Optional[bool] = None,
    role_names: Optional[List[str]] = None,
) -> User:
    """Update profile, activation flag and roles of a user"""
    changes = {}
    if full_name is not None:
        user.full_name = full_name
        changes["full_name"] = full_name
    if is_active is not None:
        if user.id == actor.id and not is_active:
            raise ValidationError("You cannot deactivate your own account")
        user.is_active = is_active
        changes["is_active"] = is_active
    if role_names is not None:
        user.roles = resolve_roles(db, role_names)
        changes["roles"] = sorted(role_names)
    
    record_audit(db, "update", "user", user.id, user=actor, details=changes)
    db.commit()
    db.refresh(user)
    
    logger.info("user_updated", user_id=user.id, fields=sorted(changes))
    return user


def update_user_last_login(db: Session, user: User):
    """Update user's last login timestamp"""
    user.last_login = utcnow()
    db.commit()


def ensure_default_roles(db: Session) -> List[Role]:
    """Create any missing default roles"""
    roles = []
    for role_data in DEFAULT_ROLES:
        role = db.query(Role).filter(Role.name == role_data["name"]).first()
        if role is None:
            role = Role(
                name=role_data["name"],
                description=role_data["description"],
                permissions=json.dumps(role_data["permissions"]),
            )
            db.add(role)
            logger.info("role_created", role=role_data["name"])
        roles.append(role)
    db.commit()
    return roles
