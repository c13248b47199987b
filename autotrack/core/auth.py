"""
Authentication utilities and dependencies.
"""
from fastapi import Depends, HTTPException, status, Cookie
from sqlalchemy.orm import Session
from typing import Optional
from autotrack.core.database import get_db
from autotrack.core.config import SESSION_SECRET, SESSION_COOKIE_NAME, SESSION_TTL_HOURS
from autotrack.models.user import User
from autotrack.services.subscription.subscription_models import Actor
import bcrypt
import hashlib
import hmac
import json
from datetime import datetime, timedelta, timezone

# Simple session storage (in-memory cache in front of signature verification)
_sessions: dict[str, dict] = {}
# Logged-out tokens, kept until their TTL would have expired anyway
_revoked: dict[str, datetime] = {}

__all__ = [
    'hash_password',
    'verify_password',
    'create_session',
    'verify_session',
    'delete_session',
    'get_current_user_dependency',
    'get_current_actor_dependency',
    'get_current_admin_user_dependency',
    'require_role',
]


def _secret() -> bytes:
    return SESSION_SECRET.encode() if SESSION_SECRET else b'default-secret-change-in-prod'


def hash_password(password: str) -> str:
    """Hash password using bcrypt."""
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')


def verify_password(password: str, hashed: str) -> bool:
    """Verify password against hash."""
    try:
        return bcrypt.checkpw(password.encode('utf-8'), hashed.encode('utf-8'))
    except ValueError:
        return False


def create_session(user_id: int, email: str, role: str, subrole: Optional[str] = None, department: Optional[str] = None) -> str:
    """Create a signed session token."""
    session_data = {
        'user_id': user_id,
        'email': email,
        'role': role,
        'subrole': subrole,
        'department': department,
        'created_at': datetime.now(timezone.utc).isoformat(),
    }

    session_json = json.dumps(session_data, sort_keys=True)
    signature = hmac.new(_secret(), session_json.encode(), hashlib.sha256).hexdigest()

    session_token = f"{session_json}.{signature}"
    _sessions[session_token] = session_data

    return session_token


def verify_session(session_token: str) -> Optional[dict]:
    """Verify and get session data."""
    if not session_token:
        return None

    if session_token in _revoked:
        return None

    if session_token in _sessions:
        return _sessions[session_token]

    parts = session_token.rsplit('.', 1)
    if len(parts) != 2:
        return None

    session_json, signature = parts
    expected_signature = hmac.new(_secret(), session_json.encode(), hashlib.sha256).hexdigest()
    if not hmac.compare_digest(signature, expected_signature):
        return None

    try:
        session_data = json.loads(session_json)
        created_at = datetime.fromisoformat(session_data['created_at'])
    except (ValueError, KeyError, TypeError):
        return None

    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    if datetime.now(timezone.utc) - created_at > timedelta(hours=SESSION_TTL_HOURS):
        return None

    _sessions[session_token] = session_data
    return session_data


def delete_session(session_token: str):
    """Delete a session and refuse the token from now on."""
    _sessions.pop(session_token, None)
    now = datetime.now(timezone.utc)
    cutoff = now - timedelta(hours=SESSION_TTL_HOURS)
    for token in [t for t, revoked_at in _revoked.items() if revoked_at < cutoff]:
        del _revoked[token]
    _revoked[session_token] = now


def get_current_user_dependency(
    session_token: Optional[str] = Cookie(None, alias=SESSION_COOKIE_NAME),
    db: Session = Depends(get_db)
) -> User:
    """Dependency to get current authenticated user."""
    if not session_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated"
        )

    session_data = verify_session(session_token)
    if not session_data:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired session"
        )

    user = db.query(User).filter(User.id == session_data['user_id']).first()
    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive"
        )

    return user


def get_current_actor_dependency(
    current_user: User = Depends(get_current_user_dependency)
) -> Actor:
    """Dependency to get the acting user's role, sub-role and department."""
    return Actor.from_user(current_user)


def get_current_admin_user_dependency(
    current_user: User = Depends(get_current_user_dependency)
) -> User:
    """Dependency to get current admin user."""
    if not current_user.is_admin():
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return current_user


def require_role(*roles: str):
    """
    Dependency factory to require one of the given roles.
    Usage: Depends(require_role('hod'))
    """
    def role_checker(actor: Actor = Depends(get_current_actor_dependency)) -> Actor:
        if actor.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"This portal requires role: {', '.join(roles)}"
            )
        return actor

    return role_checker
