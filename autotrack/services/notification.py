"""
In-app notifications for requesters and department heads.
"""
import logging
from typing import Optional, List
from sqlalchemy.orm import Session
from autotrack.core.errors import NotFoundError
from autotrack.models.notification import Notification
from autotrack.models.user import User

logger = logging.getLogger(__name__)


def add_notification(
    db: Session,
    user_id: int,
    message: str,
    kind: str = "info",
    subscription_id: Optional[int] = None,
) -> Notification:
    """Stage a notification on the session (caller commits)."""
    notification = Notification(
        user_id=user_id,
        message=message,
        kind=kind,
        subscription_id=subscription_id,
        is_read=False,
    )
    db.add(notification)
    return notification


def get_department_hod_ids(db: Session, department: str) -> List[int]:
    """IDs of active HODs heading a department."""
    rows = db.query(User.id).filter(
        User.role == "hod",
        User.department == department,
        User.is_active == True,
    ).all()
    return [row[0] for row in rows]


def has_notification(db: Session, user_id: int, subscription_id: int, kind: str) -> bool:
    return db.query(Notification.id).filter(
        Notification.user_id == user_id,
        Notification.subscription_id == subscription_id,
        Notification.kind == kind,
    ).first() is not None


def list_notifications(
    db: Session,
    user_id: int,
    unread_only: bool = False,
    limit: int = 50,
) -> List[Notification]:
    query = db.query(Notification).filter(Notification.user_id == user_id)
    if unread_only:
        query = query.filter(Notification.is_read == False)
    return query.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit).all()


def mark_notification_read(db: Session, user_id: int, notification_id: int) -> Notification:
    """Mark one of the user's notifications as read."""
    notification = db.query(Notification).filter(
        Notification.id == notification_id,
        Notification.user_id == user_id,
    ).first()
    if not notification:
        raise NotFoundError(f"Notification {notification_id} not found")

    if not notification.is_read:
        notification.is_read = True
        db.commit()
        db.refresh(notification)
    return notification
