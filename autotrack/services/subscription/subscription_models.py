"""
Subscription workflow data classes.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from autotrack.core.config import DEFAULT_ALERT_DAYS


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes (SQLite, some MySQL drivers) as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class Actor:
    """The user performing an operation, as supplied by the identity layer."""
    user_id: int
    role: str  # employee, hod, finance, admin
    subrole: Optional[str] = None  # apa, am (finance only)
    department: Optional[str] = None

    @classmethod
    def from_user(cls, user) -> "Actor":
        return cls(
            user_id=user.id,
            role=user.role,
            subrole=user.subrole if user.role == "finance" else None,
            department=user.department,
        )


@dataclass
class PaymentDetails:
    mode: str
    transaction_id: Optional[str] = None
    payment_date: Optional[datetime] = None  # Defaults to now when recorded


@dataclass
class SubscriptionRecord:
    """Subscription row as seen by the workflow."""
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
    version: int

    @classmethod
    def from_db_row(cls, row) -> "SubscriptionRecord":
        """Create SubscriptionRecord from database row."""
        return cls(
            id=row.id,
            tool_name=row.tool_name,
            vendor_name=row.vendor_name,
            department=row.department,
            purpose=row.purpose,
            cost=Decimal(row.cost) if row.cost is not None else Decimal("0"),
            duration_months=row.duration_months,
            alert_days=row.alert_days if row.alert_days is not None else DEFAULT_ALERT_DAYS,
            invoice_url=row.invoice_url,
            status=row.status,
            remarks=row.remarks,
            request_date=as_utc(row.request_date),
            approval_date=as_utc(row.approval_date),
            apa_approval_date=as_utc(row.apa_approval_date),
            payment_date=as_utc(row.payment_date),
            expiry_date=as_utc(row.expiry_date),
            payment_mode=row.payment_mode,
            transaction_id=row.transaction_id,
            requested_by=row.requested_by,
            approved_by=row.approved_by,
            apa_approved_by=row.apa_approved_by,
            paid_by=row.paid_by,
            renewal_of_id=row.renewal_of_id,
            version=row.version or 1,
        )


@dataclass
class RenewalWindow:
    """Read-time view of a subscription's expiry state."""
    effective_status: str
    days_until_expiry: Optional[int]
    is_renewable: bool
    should_alert: bool
