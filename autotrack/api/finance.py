"""
Finance endpoints: APA verification and AM payment processing.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime

from autotrack.core.database import get_db
from autotrack.core.auth import require_role
from autotrack.api.subscriptions import SubscriptionResponse, to_response_list
from autotrack.models.subscription import SubscriptionStatus
from autotrack.services.subscription import (
    Actor,
    PaymentDetails,
    apa_approve,
    apa_decline,
    record_payment,
    get_finance_queue,
)
from autotrack.services.subscription.subscription_repository import query_all

router = APIRouter()

_HISTORY_STATUSES = {
    "active": SubscriptionStatus.ACTIVE,
    "declined_by_hod": SubscriptionStatus.DECLINED_BY_HOD,
    "declined_by_apa": SubscriptionStatus.DECLINED_BY_APA,
}


class DeclineRequest(BaseModel):
    reason: str


class PaymentRequest(BaseModel):
    mode: str  # Card, UPI, NetBanking, Bank Transfer
    transaction_id: Optional[str] = None
    payment_date: Optional[datetime] = None


@router.get("/queue", response_model=List[SubscriptionResponse])
async def list_queue(
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role("finance")),
):
    """Requests waiting on the caller's stage (APA: HOD-approved, AM: APA-approved)."""
    return to_response_list(get_finance_queue(db, actor))


@router.get("/history", response_model=List[SubscriptionResponse])
async def list_history(
    kind: str = Query("active", pattern="^(active|declined_by_hod|declined_by_apa)$"),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role("finance")),
):
    """Paid or declined requests across all departments."""
    return to_response_list(
        query_all(db, status=_HISTORY_STATUSES[kind].value, limit=limit, offset=offset)
    )


@router.post("/subscriptions/{subscription_id}/approve", response_model=SubscriptionResponse)
async def approve(
    subscription_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role("finance")),
):
    return SubscriptionResponse.from_record(apa_approve(db, actor, subscription_id))


@router.post("/subscriptions/{subscription_id}/decline", response_model=SubscriptionResponse)
async def decline(
    subscription_id: int,
    request: DeclineRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role("finance")),
):
    return SubscriptionResponse.from_record(apa_decline(db, actor, subscription_id, request.reason))


@router.post("/subscriptions/{subscription_id}/pay", response_model=SubscriptionResponse)
async def pay(
    subscription_id: int,
    request: PaymentRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role("finance")),
):
    """Record payment and activate the subscription."""
    payment = PaymentDetails(
        mode=request.mode,
        transaction_id=request.transaction_id,
        payment_date=request.payment_date,
    )
    return SubscriptionResponse.from_record(record_payment(db, actor, subscription_id, payment))
