"""
Authentication and user administration routes
"""
from typing import List
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from jose import JWTError
import structlog

from talentrack.core.config import settings
from talentrack.core.database import get_db
from talentrack.core.exceptions import AuthenticationError, NotFoundError
from talentrack.auth.dependencies import get_current_active_user, require_role
from talentrack.auth.service import (
    authenticate_user,
    create_access_token,
    create_refresh_token,
    create_user,
    decode_token,
    get_user_by_email,
    get_user_by_id,
    update_user,
    update_user_last_login,
)
from talentrack.auth.schemas import (
    Token,
    LoginRequest,
    UserCreate,
    UserUpdate,
    UserResponse,
    RefreshTokenRequest,
)
from talentrack.models.user import User

router = APIRouter(prefix="/api/v1/auth", tags=["Authentication"])
logger = structlog.get_logger()


def user_to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        full_name=user.full_name,
        is_active=user.is_active,
        is_verified=user.is_verified,
        roles=user.role_names,
        last_login=user.last_login,
        created_at=user.created_at,
    )


def _issue_tokens(user: User) -> Token:
    claims = {"sub": user.email, "user_id": user.id}
    return Token(
        access_token=create_access_token(claims),
        refresh_token=create_refresh_token(claims),
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserCreate,
    db: Session = Depends(get_db),
):
    """Register a new user with DEFAULT_USER_ROLE"""
    user = create_user(
        db=db,
        email=user_data.email,
        password=user_data.password,
        full_name=user_data.full_name,
    )
    return user_to_response(user)


@router.post("/login", response_model=Token)
def login(
    credentials: LoginRequest,
    db: Session = Depends(get_db),
):
    """Authenticate user and return tokens"""
    user = authenticate_user(db, credentials.email, credentials.password)
    if not user:
        logger.warning("failed_login_attempt", email=credentials.email)
        raise AuthenticationError("Incorrect email or password")
    
    if not user.is_active:
        raise AuthenticationError("User account is inactive")
    
    update_user_last_login(db, user)
    
    logger.info("user_logged_in", user_id=user.id)
    return _issue_tokens(user)


@router.post("/refresh", response_model=Token)
def refresh_token(
    token_data: RefreshTokenRequest,
    db: Session = Depends(get_db),
):
    """Refresh access token using refresh token"""
    try:
        payload = decode_token(token_data.refresh_token)
    except JWTError:
        raise AuthenticationError("Invalid refresh token")
    
    if payload.get("type") != "refresh":
        raise AuthenticationError("Invalid token type")
    
    email = payload.get("sub")
    if email is None:
        raise AuthenticationError("Invalid token")
    
    user = get_user_by_email(db, email)
    if not user or not user.is_active:
        raise AuthenticationError("User not found or inactive")
    
    return _issue_tokens(user)


@router.get("/me", response_model=UserResponse)
def get_current_user_info(
    current_user: User = Depends(get_current_active_user),
):
    """Get current user information"""
    return user_to_response(current_user)


@router.get("/users", response_model=List[UserResponse])
def list_users(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    current_user: User = Depends(require_role("admin")),
    db: Session = Depends(get_db),
):
    """List users (admin only)"""
    users = db.query(User).order_by(User.id).offset(skip).limit(limit).all()
    return [user_to_response(user) for user in users]


@router.patch("/users/{user_id}", response_model=UserResponse)
def patch_user(
    user_id: int,
    user_data: UserUpdate,
    current_user: User = Depends(require_role("admin")),
    db: Session = Depends(get_db),
):
    """Update a user's name, activation and roles (admin only)"""
    user = get_user_by_id(db, user_id)
    if not user:
        raise NotFoundError("User", str(user_id))
    
    user = update_user(
        db,
        user,
        actor=current_user,
        full_name=user_data.full_name,
        is_active=user_data.is_active,
        role_names=user_data.role_names,
    )
    return user_to_response(user)
