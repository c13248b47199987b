"""
Authentication endpoints.

Each portal (employee, HOD, finance APA/AM, admin) logs in with its own role;
an account can only enter the portal matching its role and finance sub-role.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status, Response, Cookie
from sqlalchemy.orm import Session
from typing import Optional
from pydantic import BaseModel, EmailStr
from datetime import datetime
from autotrack.core.config import SESSION_COOKIE_NAME, SESSION_TTL_HOURS
from autotrack.core.database import get_db
from autotrack.core.auth import (
    create_session,
    delete_session,
    verify_password,
    get_current_user_dependency,
)
from autotrack.models.user import User

logger = logging.getLogger(__name__)

router = APIRouter()


class LoginRequest(BaseModel):
    email: EmailStr
    password: str
    role: str  # Portal being entered
    subrole: Optional[str] = None  # Required for the finance portal


class UserResponse(BaseModel):
    id: int
    email: str
    full_name: Optional[str]
    role: str
    subrole: Optional[str]
    department: str
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


@router.post("/login", response_model=dict)
async def login(
    request: LoginRequest,
    response: Response,
    db: Session = Depends(get_db)
):
    """Login with email and password into a role-specific portal."""
    user = db.query(User).filter(User.email == request.email.strip().lower()).first()

    if not user or not verify_password(request.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password"
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive"
        )

    if user.role != request.role or (user.role == 'finance' and user.subrole != request.subrole):
        logger.warning(f"Portal mismatch for user {user.id}: account {user.role}/{user.subrole}, portal {request.role}/{request.subrole}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access Denied: Your account role does not match this portal."
        )

    session_token = create_session(user.id, user.email, user.role, user.subrole, user.department)

    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=session_token,
        httponly=True,
        secure=False,  # Set to True in production with HTTPS
        samesite="lax",
        max_age=SESSION_TTL_HOURS * 3600,
        path="/",
    )

    return {
        "success": True,
        "user": UserResponse.model_validate(user),
    }


@router.post("/logout", response_model=dict)
async def logout(
    response: Response,
    session_token: Optional[str] = Cookie(None, alias=SESSION_COOKIE_NAME)
):
    """Logout and clear session."""
    if session_token:
        delete_session(session_token)

    response.delete_cookie(
        key=SESSION_COOKIE_NAME,
        httponly=True,
        samesite="lax"
    )

    return {"success": True, "message": "Logged out"}


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user_dependency)):
    """Get current user info."""
    return current_user
