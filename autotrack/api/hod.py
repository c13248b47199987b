"""
Head-of-department approval endpoints.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from pydantic import BaseModel
from typing import List

from autotrack.core.database import get_db
from autotrack.core.auth import require_role
from autotrack.api.subscriptions import SubscriptionResponse, to_response_list
from autotrack.models.subscription import SubscriptionStatus
from autotrack.services.subscription import Actor, hod_approve, hod_decline
from autotrack.services.subscription.subscription_repository import (
    query_all,
    query_by_status_and_department,
)

router = APIRouter()


class DeclineRequest(BaseModel):
    reason: str


@router.get("/pending", response_model=List[SubscriptionResponse])
async def list_pending(
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role("hod")),
):
    """Pending requests of the HOD's department."""
    return to_response_list(
        query_by_status_and_department(db, SubscriptionStatus.PENDING.value, actor.department)
    )


@router.get("/department", response_model=List[SubscriptionResponse])
async def list_department(
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role("hod")),
):
    """Every request of the HOD's department, newest first."""
    return to_response_list(query_all(db, department=actor.department, limit=500))


@router.post("/subscriptions/{subscription_id}/approve", response_model=SubscriptionResponse)
async def approve(
    subscription_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role("hod")),
):
    return SubscriptionResponse.from_record(hod_approve(db, actor, subscription_id))


@router.post("/subscriptions/{subscription_id}/decline", response_model=SubscriptionResponse)
async def decline(
    subscription_id: int,
    request: DeclineRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role("hod")),
):
    return SubscriptionResponse.from_record(hod_decline(db, actor, subscription_id, request.reason))
