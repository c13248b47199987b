"""
Admin user management endpoints.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from pydantic import BaseModel, EmailStr
from typing import Optional, List

from autotrack.core.database import get_db
from autotrack.core.auth import get_current_admin_user_dependency
from autotrack.api.auth import UserResponse
from autotrack.models.user import User
from autotrack.services.users import create_user, update_user

router = APIRouter()


class UserListItem(UserResponse):
    is_active: bool


class CreateUserRequest(BaseModel):
    email: EmailStr
    password: str
    full_name: Optional[str] = None
    role: str
    subrole: Optional[str] = None
    department: str


class UpdateUserRequest(BaseModel):
    role: Optional[str] = None
    subrole: Optional[str] = None
    department: Optional[str] = None
    is_active: Optional[bool] = None


@router.get("/users", response_model=List[UserListItem])
async def list_users(
    role: Optional[str] = Query(None),
    department: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    admin_user: User = Depends(get_current_admin_user_dependency),
):
    query = db.query(User)
    if role:
        query = query.filter(User.role == role)
    if department:
        query = query.filter(User.department == department)
    return query.order_by(User.id.asc()).all()


@router.post("/users", response_model=UserListItem, status_code=201)
async def add_user(
    request: CreateUserRequest,
    db: Session = Depends(get_db),
    admin_user: User = Depends(get_current_admin_user_dependency),
):
    return create_user(
        db,
        email=request.email,
        password=request.password,
        full_name=request.full_name,
        role=request.role,
        subrole=request.subrole,
        department=request.department,
    )


@router.patch("/users/{user_id}", response_model=UserListItem)
async def edit_user(
    user_id: int,
    request: UpdateUserRequest,
    db: Session = Depends(get_db),
    admin_user: User = Depends(get_current_admin_user_dependency),
):
    return update_user(
        db,
        user_id,
        role=request.role,
        subrole=request.subrole,
        department=request.department,
        is_active=request.is_active,
    )
