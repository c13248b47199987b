"""
User account management (admin portal and setup scripts).
"""
import logging
from typing import Optional
from sqlalchemy.orm import Session
from autotrack.core.auth import hash_password
from autotrack.core.errors import NotFoundError, ValidationError
from autotrack.models.user import User, ROLES, SUBROLES

logger = logging.getLogger(__name__)


def _normalize_role(role: str, subrole: Optional[str]) -> tuple[str, Optional[str]]:
    if role not in ROLES:
        raise ValidationError(f"Unknown role '{role}'. Expected one of: {', '.join(ROLES)}")
    if role == "finance":
        # Finance accounts default to the APA sub-role
        subrole = subrole or "apa"
        if subrole not in SUBROLES:
            raise ValidationError(f"Unknown finance sub-role '{subrole}'")
        return role, subrole
    return role, None


def create_user(
    db: Session,
    email: str,
    password: str,
    role: str,
    department: str,
    full_name: Optional[str] = None,
    subrole: Optional[str] = None,
) -> User:
    """
    Create a user account.

    Raises:
        ValidationError: bad role/sub-role, short password, missing department or duplicate email
    """
    email = (email or "").strip().lower()
    if not email:
        raise ValidationError("Email is required")
    if not password or len(password) < 6:
        raise ValidationError("Password is required and must be at least 6 characters long")
    department = (department or "").strip()
    if not department:
        raise ValidationError("Department is required")
    role, subrole = _normalize_role(role, subrole)

    if db.query(User).filter(User.email == email).first():
        raise ValidationError(f"User with email {email} already exists")

    user = User(
        email=email,
        hashed_password=hash_password(password),
        full_name=full_name,
        role=role,
        subrole=subrole,
        department=department,
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Created user {user.id} ({email}) as {role}{'/' + subrole if subrole else ''} in {department}")
    return user


def update_user(
    db: Session,
    user_id: int,
    role: Optional[str] = None,
    subrole: Optional[str] = None,
    department: Optional[str] = None,
    is_active: Optional[bool] = None,
) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError(f"User {user_id} not found")

    if role is not None or subrole is not None:
        user.role, user.subrole = _normalize_role(role or user.role, subrole or user.subrole)
    if department is not None:
        department = department.strip()
        if not department:
            raise ValidationError("Department is required")
        user.department = department
    if is_active is not None:
        user.is_active = is_active

    db.commit()
    db.refresh(user)
    logger.info(f"Updated user {user.id}: role={user.role}, subrole={user.subrole}, department={user.department}, active={user.is_active}")
    return user
