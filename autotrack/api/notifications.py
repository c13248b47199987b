"""
Notification endpoints.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime

from autotrack.core.database import get_db
from autotrack.core.auth import get_current_user_dependency
from autotrack.models.user import User
from autotrack.services.notification import list_notifications, mark_notification_read

router = APIRouter()


class NotificationResponse(BaseModel):
    id: int
    message: str
    kind: str
    subscription_id: Optional[int]
    is_read: bool
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


@router.get("", response_model=List[NotificationResponse])
async def get_notifications(
    unread_only: bool = Query(False),
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user_dependency),
):
    return list_notifications(db, current_user.id, unread_only=unread_only, limit=limit)


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def read_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user_dependency),
):
    return mark_notification_read(db, current_user.id, notification_id)
