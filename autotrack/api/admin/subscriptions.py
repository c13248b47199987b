"""
Admin subscription oversight endpoints (read-only).
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from pydantic import BaseModel
from typing import Optional, List, Any, Dict
from datetime import datetime

from autotrack.core.database import get_db
from autotrack.core.auth import get_current_admin_user_dependency
from autotrack.core.errors import NotFoundError
from autotrack.api.subscriptions import SubscriptionResponse, to_response_list
from autotrack.models.audit_log import AuditLog
from autotrack.models.subscription import SubscriptionStatus
from autotrack.models.user import User
from autotrack.services.subscription.subscription_repository import query_all, get_subscription

router = APIRouter()

_STORED_STATUSES = [s.value for s in SubscriptionStatus if s != SubscriptionStatus.EXPIRED]


class AuditEntryResponse(BaseModel):
    id: int
    action_type: str
    actor_user_id: int
    from_status: Optional[str]
    to_status: str
    details: Optional[Dict[str, Any]]
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


@router.get("/subscriptions", response_model=List[SubscriptionResponse])
async def list_subscriptions(
    status: Optional[str] = Query(None, description=f"Stored status, one of: {', '.join(_STORED_STATUSES)}"),
    department: Optional[str] = Query(None),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    admin_user: User = Depends(get_current_admin_user_dependency),
):
    """All subscriptions across departments (admin only)."""
    return to_response_list(query_all(db, status=status, department=department, limit=limit, offset=offset))


@router.get("/subscriptions/{subscription_id}/history", response_model=List[AuditEntryResponse])
async def get_subscription_history(
    subscription_id: int,
    db: Session = Depends(get_db),
    admin_user: User = Depends(get_current_admin_user_dependency),
):
    """Transition history of one subscription, oldest first."""
    if not get_subscription(db, subscription_id):
        raise NotFoundError(f"Subscription {subscription_id} not found")
    return (
        db.query(AuditLog)
        .filter(AuditLog.subscription_id == subscription_id)
        .order_by(AuditLog.created_at.asc(), AuditLog.id.asc())
        .all()
    )
