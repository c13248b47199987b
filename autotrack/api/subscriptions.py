"""
Subscription request API endpoints (requester portal).
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date, datetime
from decimal import Decimal

from autotrack.core.database import get_db
from autotrack.core.auth import get_current_actor_dependency, require_role
from autotrack.services.subscription import (
    Actor,
    SubscriptionRecord,
    submit_request,
    renew_subscription,
    get_subscription_for_actor,
    get_renewal_alerts,
    renewal_window,
)
from autotrack.services.subscription.subscription_repository import query_by_requester
from autotrack.services.subscription.subscription_service import REQUESTER_ROLES

router = APIRouter()


class SubscriptionResponse(BaseModel):
    id: int
    tool_name: str
    vendor_name: Optional[str]
    department: str
    purpose: str
    cost: Decimal
    duration_months: int
    alert_days: int
    invoice_url: Optional[str]
    status: str
    effective_status: str  # Expired is derived here, never stored
    days_until_expiry: Optional[int]
    is_renewable: bool
    remarks: Optional[str]
    request_date: datetime
    approval_date: Optional[datetime]
    apa_approval_date: Optional[datetime]
    payment_date: Optional[datetime]
    expiry_date: Optional[datetime]
    payment_mode: Optional[str]
    transaction_id: Optional[str]
    requested_by: int
    approved_by: Optional[int]
    apa_approved_by: Optional[int]
    paid_by: Optional[int]
    renewal_of_id: Optional[int]

    @classmethod
    def from_record(cls, record: SubscriptionRecord, today: Optional[date] = None) -> "SubscriptionResponse":
        window = renewal_window(record, today)
        return cls(
            id=record.id,
            tool_name=record.tool_name,
            vendor_name=record.vendor_name,
            department=record.department,
            purpose=record.purpose,
            cost=record.cost,
            duration_months=record.duration_months,
            alert_days=record.alert_days,
            invoice_url=record.invoice_url,
            status=record.status,
            effective_status=window.effective_status,
            days_until_expiry=window.days_until_expiry,
            is_renewable=window.is_renewable,
            remarks=record.remarks,
            request_date=record.request_date,
            approval_date=record.approval_date,
            apa_approval_date=record.apa_approval_date,
            payment_date=record.payment_date,
            expiry_date=record.expiry_date,
            payment_mode=record.payment_mode,
            transaction_id=record.transaction_id,
            requested_by=record.requested_by,
            approved_by=record.approved_by,
            apa_approved_by=record.apa_approved_by,
            paid_by=record.paid_by,
            renewal_of_id=record.renewal_of_id,
        )


def to_response_list(records: List[SubscriptionRecord]) -> List[SubscriptionResponse]:
    return [SubscriptionResponse.from_record(record) for record in records]


class CreateSubscriptionRequest(BaseModel):
    tool_name: str
    vendor_name: Optional[str] = None
    department: Optional[str] = None  # Defaults to the requester's department
    purpose: str
    cost: Decimal
    duration_months: int
    alert_days: Optional[int] = None
    invoice_url: Optional[str] = None


class RenewSubscriptionRequest(BaseModel):
    cost: Decimal
    duration_months: int
    justification: str = Field(..., description="Why the subscription should be renewed")
    alert_days: Optional[int] = None


@router.post("", response_model=SubscriptionResponse, status_code=201)
async def create_subscription_request(
    request: CreateSubscriptionRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role(*REQUESTER_ROLES)),
):
    """Submit a new subscription request."""
    record = submit_request(
        db,
        actor,
        tool_name=request.tool_name,
        vendor_name=request.vendor_name,
        department=request.department,
        purpose=request.purpose,
        cost=request.cost,
        duration_months=request.duration_months,
        alert_days=request.alert_days,
        invoice_url=request.invoice_url,
    )
    return SubscriptionResponse.from_record(record)


@router.get("/mine", response_model=List[SubscriptionResponse])
async def list_my_subscriptions(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor_dependency),
):
    """All requests submitted by the current user, newest first."""
    return to_response_list(query_by_requester(db, actor.user_id))


@router.get("/renewal-alerts", response_model=List[SubscriptionResponse])
async def list_renewal_alerts(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor_dependency),
):
    """Active subscriptions expiring within their alert window."""
    return to_response_list(get_renewal_alerts(db, actor))


@router.get("/{subscription_id}", response_model=SubscriptionResponse)
async def get_subscription(
    subscription_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor_dependency),
):
    return SubscriptionResponse.from_record(get_subscription_for_actor(db, actor, subscription_id))


@router.post("/{subscription_id}/renew", response_model=SubscriptionResponse, status_code=201)
async def renew(
    subscription_id: int,
    request: RenewSubscriptionRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role(*REQUESTER_ROLES)),
):
    """Create a renewal request; the original subscription is left unchanged."""
    record = renew_subscription(
        db,
        actor,
        subscription_id,
        cost=request.cost,
        duration_months=request.duration_months,
        justification=request.justification,
        alert_days=request.alert_days,
    )
    return SubscriptionResponse.from_record(record)
