"""
Subscription workflow service.

Request lifecycle:
    Pending -> Approved by HOD -> Approved by APA -> Active (-> Expired, derived)
with a terminal decline branch at the HOD and APA stages.

Every operation takes the acting user explicitly, re-reads the record, checks
the actor gate and the required pre-state, and writes with a compare-and-swap
on (status, version). The transition, its audit row and its notifications are
committed together.
"""
import logging
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Optional, List, Dict, Any
from sqlalchemy.orm import Session

from autotrack.core.config import DEFAULT_ALERT_DAYS, MIN_ALERT_DAYS, MAX_ALERT_DAYS
from autotrack.core.errors import (
    NotFoundError,
    InvalidTransitionError,
    UnauthorizedError,
    ValidationError,
)
from autotrack.models.audit_log import AuditLog
from autotrack.models.subscription import SubscriptionStatus
from autotrack.services.notification import add_notification, get_department_hod_ids
from autotrack.services.subscription import subscription_repository as repo
from autotrack.services.subscription.renewal import add_months, is_renewable, should_alert, utc_today
from autotrack.services.subscription.subscription_models import (
    Actor,
    PaymentDetails,
    SubscriptionRecord,
    as_utc,
)

logger = logging.getLogger(__name__)

REQUESTER_ROLES = ("employee", "hod")
PAYMENT_MODES = ("Card", "UPI", "NetBanking", "Bank Transfer")
CENT = Decimal("0.01")
MAX_COST = Decimal("10000000000")
OPEN_STATUSES = (
    SubscriptionStatus.PENDING.value,
    SubscriptionStatus.APPROVED_BY_HOD.value,
    SubscriptionStatus.APPROVED_BY_APA.value,
)


def _now(now: Optional[datetime]) -> datetime:
    return as_utc(now) if now else datetime.now(timezone.utc)


def _require_text(value: Optional[str], field: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValidationError(f"{field} is required")
    return value


def _validate_cost(cost) -> Decimal:
    try:
        amount = Decimal(str(cost))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Invalid cost: {cost!r}")
    if not amount.is_finite() or amount <= 0:
        raise ValidationError("Cost must be a positive amount")
    # Stored as Numeric(12, 2)
    if amount >= MAX_COST:
        raise ValidationError(f"Cost must be below {MAX_COST}")
    if amount != amount.quantize(CENT):
        raise ValidationError("Cost cannot have more than two decimal places")
    return amount


def _validate_duration(duration_months) -> int:
    if isinstance(duration_months, bool) or not isinstance(duration_months, int):
        raise ValidationError("Duration must be a whole number of months")
    if duration_months <= 0:
        raise ValidationError("Duration must be at least one month")
    return duration_months


def _validate_alert_days(alert_days: Optional[int]) -> int:
    if alert_days is None:
        return DEFAULT_ALERT_DAYS
    if isinstance(alert_days, bool) or not isinstance(alert_days, int):
        raise ValidationError("Alert days must be a whole number")
    if not MIN_ALERT_DAYS <= alert_days <= MAX_ALERT_DAYS:
        raise ValidationError(f"Alert days must be between {MIN_ALERT_DAYS} and {MAX_ALERT_DAYS}")
    return alert_days


def _load(db: Session, subscription_id: int) -> SubscriptionRecord:
    subscription = repo.get_subscription(db, subscription_id)
    if not subscription:
        raise NotFoundError(f"Subscription {subscription_id} not found")
    return subscription


def _require_status(subscription: SubscriptionRecord, expected: SubscriptionStatus, action: str) -> None:
    if subscription.status != expected.value:
        logger.warning(
            f"Rejected {action} on subscription {subscription.id}: "
            f"status is '{subscription.status}', expected '{expected.value}'"
        )
        raise InvalidTransitionError(
            f"Cannot {action}: subscription {subscription.id} is '{subscription.status}', "
            f"expected '{expected.value}'"
        )


def _require_hod(actor: Actor, subscription: SubscriptionRecord) -> None:
    if actor.role != "hod":
        raise UnauthorizedError("Only a head of department can act on pending requests")
    if actor.department != subscription.department:
        raise UnauthorizedError(
            f"HOD of '{actor.department}' cannot act on '{subscription.department}' requests"
        )


def _require_finance(actor: Actor, subrole: str) -> None:
    if actor.role != "finance" or actor.subrole != subrole:
        raise UnauthorizedError(f"Only finance/{subrole} users can perform this action")


def _audit(
    db: Session,
    action_type: str,
    actor: Actor,
    subscription_id: int,
    from_status: Optional[str],
    to_status: str,
    details: Optional[Dict[str, Any]] = None,
) -> None:
    db.add(AuditLog(
        action_type=action_type,
        actor_user_id=actor.user_id,
        subscription_id=subscription_id,
        from_status=from_status,
        to_status=to_status,
        details=details,
    ))


def _transition(
    db: Session,
    actor: Actor,
    subscription: SubscriptionRecord,
    action_type: str,
    to_status: SubscriptionStatus,
    fields: Dict[str, Any],
    message: str,
    notification_kind: str,
    details: Optional[Dict[str, Any]] = None,
) -> SubscriptionRecord:
    """Compare-and-swap the status, then record audit + notification and commit."""
    values = dict(fields)
    values["status"] = to_status.value
    try:
        updated = repo.update_subscription(
            db,
            subscription.id,
            values,
            expected_status=subscription.status,
            expected_version=subscription.version,
        )
        if not updated:
            db.rollback()
            logger.warning(f"Lost update race on subscription {subscription.id} ({action_type})")
            raise InvalidTransitionError(
                f"Subscription {subscription.id} was modified concurrently; reload and retry"
            )

        _audit(db, action_type, actor, subscription.id, subscription.status, to_status.value, details)
        add_notification(db, subscription.requested_by, message, notification_kind, subscription.id)
        db.commit()
    except InvalidTransitionError:
        raise
    except Exception:
        db.rollback()
        raise

    logger.info(
        f"Subscription {subscription.id}: '{subscription.status}' -> '{to_status.value}' "
        f"by user {actor.user_id} ({action_type})"
    )
    return _load(db, subscription.id)


def _insert_request(
    db: Session,
    actor: Actor,
    fields: Dict[str, Any],
    action_type: str,
    message: str,
) -> SubscriptionRecord:
    try:
        subscription_id = repo.create_subscription(db, fields)
        _audit(db, action_type, actor, subscription_id, None, SubscriptionStatus.PENDING.value,
               {"renewal_of_id": fields.get("renewal_of_id")} if fields.get("renewal_of_id") else None)
        add_notification(db, actor.user_id, message, "submitted", subscription_id)
        for hod_id in get_department_hod_ids(db, fields["department"]):
            if hod_id != actor.user_id:
                add_notification(
                    db, hod_id,
                    f"New request for {fields['tool_name']} is awaiting your approval.",
                    "submitted", subscription_id,
                )
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"Subscription {subscription_id} created by user {actor.user_id} ({action_type})")
    return _load(db, subscription_id)


def submit_request(
    db: Session,
    actor: Actor,
    tool_name: str,
    purpose: str,
    cost,
    duration_months: int,
    vendor_name: Optional[str] = None,
    department: Optional[str] = None,
    alert_days: Optional[int] = None,
    invoice_url: Optional[str] = None,
    now: Optional[datetime] = None,
) -> SubscriptionRecord:
    """
    Create a new Pending subscription request.

    Args:
        db: Database session
        actor: Requesting user (employee or HOD)
        tool_name: Software being requested
        purpose: Business justification
        cost: Amount (positive)
        duration_months: Subscription length in months (positive)
        vendor_name: Optional vendor
        department: Department the request belongs to (defaults to the actor's)
        alert_days: Days before expiry to start renewal alerts (1-60, default 10)
        invoice_url: Optional link to a quote or invoice
        now: Override for the request timestamp

    Returns:
        Created SubscriptionRecord
    """
    if actor.role not in REQUESTER_ROLES:
        raise UnauthorizedError(f"Role '{actor.role}' cannot submit subscription requests")

    fields = {
        "tool_name": _require_text(tool_name, "Tool name"),
        "vendor_name": (vendor_name or "").strip() or None,
        "department": _require_text(department or actor.department, "Department"),
        "purpose": _require_text(purpose, "Purpose"),
        "cost": _validate_cost(cost),
        "duration_months": _validate_duration(duration_months),
        "alert_days": _validate_alert_days(alert_days),
        "invoice_url": (invoice_url or "").strip() or None,
        "status": SubscriptionStatus.PENDING.value,
        "request_date": _now(now),
        "requested_by": actor.user_id,
        "version": 1,
    }
    return _insert_request(
        db, actor, fields, "submit",
        f"Your request for {fields['tool_name']} has been submitted.",
    )


def renew_subscription(
    db: Session,
    actor: Actor,
    subscription_id: int,
    cost,
    duration_months: int,
    justification: str,
    alert_days: Optional[int] = None,
    now: Optional[datetime] = None,
    today: Optional[date] = None,
) -> SubscriptionRecord:
    """
    Create a renewal request for a paid subscription.

    The source must be Active and inside its renewal window on `today`, and
    must not already have a renewal in progress. The source record is left
    untouched. The new record starts Pending with tool, vendor, department and
    purpose copied from the source and every approval, payment and expiry
    field empty.
    """
    justification = _require_text(justification, "Justification")
    amount = _validate_cost(cost)
    duration = _validate_duration(duration_months)

    source = _load(db, subscription_id)
    if actor.role not in REQUESTER_ROLES:
        raise UnauthorizedError(f"Role '{actor.role}' cannot request renewals")
    if actor.user_id != source.requested_by and actor.department != source.department:
        raise UnauthorizedError("Only the original requester or their department can renew")
    if source.status != SubscriptionStatus.ACTIVE.value:
        raise InvalidTransitionError(
            f"Only paid subscriptions can be renewed; subscription {source.id} is '{source.status}'"
        )
    if not is_renewable(source, today or utc_today()):
        raise InvalidTransitionError(
            f"Subscription {source.id} can only be renewed within {source.alert_days} days before expiry"
        )
    open_renewals = [r for r in repo.query_by_renewal_of(db, source.id) if r.status in OPEN_STATUSES]
    if open_renewals:
        raise InvalidTransitionError(
            f"Subscription {source.id} already has a renewal in progress (request {open_renewals[0].id})"
        )

    fields = {
        "tool_name": source.tool_name,
        "vendor_name": source.vendor_name,
        "department": source.department,
        "purpose": source.purpose,
        "cost": amount,
        "duration_months": duration,
        "alert_days": _validate_alert_days(alert_days if alert_days is not None else source.alert_days),
        "remarks": justification,
        "status": SubscriptionStatus.PENDING.value,
        "request_date": _now(now),
        "requested_by": actor.user_id,
        "approved_by": None,
        "approval_date": None,
        "apa_approved_by": None,
        "apa_approval_date": None,
        "paid_by": None,
        "payment_date": None,
        "expiry_date": None,
        "payment_mode": None,
        "transaction_id": None,
        "renewal_of_id": source.id,
        "version": 1,
    }
    return _insert_request(
        db, actor, fields, "renew",
        f"Your renewal request for {source.tool_name} has been submitted.",
    )


def hod_approve(db: Session, actor: Actor, subscription_id: int, now: Optional[datetime] = None) -> SubscriptionRecord:
    subscription = _load(db, subscription_id)
    _require_hod(actor, subscription)
    _require_status(subscription, SubscriptionStatus.PENDING, "approve")
    return _transition(
        db, actor, subscription, "hod_approve", SubscriptionStatus.APPROVED_BY_HOD,
        {"approved_by": actor.user_id, "approval_date": _now(now)},
        f"Your request for {subscription.tool_name} has been approved by the HOD.",
        "approved",
    )


def hod_decline(
    db: Session,
    actor: Actor,
    subscription_id: int,
    reason: str,
    now: Optional[datetime] = None,
) -> SubscriptionRecord:
    """Decline a pending request. The deciding HOD is recorded in approved_by/approval_date."""
    reason = _require_text(reason, "Decline reason")
    subscription = _load(db, subscription_id)
    _require_hod(actor, subscription)
    _require_status(subscription, SubscriptionStatus.PENDING, "decline")
    return _transition(
        db, actor, subscription, "hod_decline", SubscriptionStatus.DECLINED_BY_HOD,
        {
            "approved_by": actor.user_id,
            "approval_date": _now(now),
            "remarks": f"Declined by HOD: {reason}",
        },
        f"Your request for {subscription.tool_name} has been declined by HOD. Reason: {reason}",
        "declined",
        {"reason": reason},
    )


def apa_approve(db: Session, actor: Actor, subscription_id: int, now: Optional[datetime] = None) -> SubscriptionRecord:
    subscription = _load(db, subscription_id)
    _require_finance(actor, "apa")
    _require_status(subscription, SubscriptionStatus.APPROVED_BY_HOD, "approve")
    return _transition(
        db, actor, subscription, "apa_approve", SubscriptionStatus.APPROVED_BY_APA,
        {"apa_approved_by": actor.user_id, "apa_approval_date": _now(now)},
        f"Your request for {subscription.tool_name} has been approved by Finance.",
        "approved",
    )


def apa_decline(
    db: Session,
    actor: Actor,
    subscription_id: int,
    reason: str,
    now: Optional[datetime] = None,
) -> SubscriptionRecord:
    reason = _require_text(reason, "Decline reason")
    subscription = _load(db, subscription_id)
    _require_finance(actor, "apa")
    _require_status(subscription, SubscriptionStatus.APPROVED_BY_HOD, "decline")
    return _transition(
        db, actor, subscription, "apa_decline", SubscriptionStatus.DECLINED_BY_APA,
        {
            "apa_approved_by": actor.user_id,
            "apa_approval_date": _now(now),
            "remarks": f"Declined by APA: {reason}",
        },
        f"Your request for {subscription.tool_name} has been declined by Finance. Reason: {reason}",
        "declined",
        {"reason": reason},
    )


def record_payment(
    db: Session,
    actor: Actor,
    subscription_id: int,
    payment: PaymentDetails,
    now: Optional[datetime] = None,
) -> SubscriptionRecord:
    """
    Record payment by the Accounts Manager and activate the subscription.

    expiry_date is set here, once, as payment_date + duration_months.
    """
    mode = _require_text(payment.mode, "Payment mode")
    if mode not in PAYMENT_MODES:
        raise ValidationError(f"Unknown payment mode '{mode}'. Expected one of: {', '.join(PAYMENT_MODES)}")

    subscription = _load(db, subscription_id)
    _require_finance(actor, "am")
    _require_status(subscription, SubscriptionStatus.APPROVED_BY_APA, "record payment")

    payment_date = as_utc(payment.payment_date) if payment.payment_date else _now(now)
    expiry_date = add_months(payment_date, subscription.duration_months)
    transaction_id = (payment.transaction_id or "").strip() or None
    return _transition(
        db, actor, subscription, "payment", SubscriptionStatus.ACTIVE,
        {
            "paid_by": actor.user_id,
            "payment_date": payment_date,
            "expiry_date": expiry_date,
            "payment_mode": mode,
            "transaction_id": transaction_id,
            "remarks": f"Paid via {mode}",
        },
        f"Payment for {subscription.tool_name} has been completed. Your subscription is now active.",
        "paid",
        {"mode": mode, "transaction_id": transaction_id},
    )


def can_view(actor: Actor, subscription: SubscriptionRecord) -> bool:
    """Read access: requester, HOD of the department, finance and admin."""
    if actor.role in ("finance", "admin"):
        return True
    if actor.role == "hod" and actor.department == subscription.department:
        return True
    return actor.user_id == subscription.requested_by


def get_subscription_for_actor(db: Session, actor: Actor, subscription_id: int) -> SubscriptionRecord:
    subscription = _load(db, subscription_id)
    if not can_view(actor, subscription):
        raise UnauthorizedError(f"Not allowed to view subscription {subscription_id}")
    return subscription


def get_finance_queue(db: Session, actor: Actor) -> List[SubscriptionRecord]:
    """Records waiting on the actor's finance stage."""
    if actor.role != "finance" or actor.subrole not in ("apa", "am"):
        raise UnauthorizedError("Finance access required")
    status = SubscriptionStatus.APPROVED_BY_HOD if actor.subrole == "apa" else SubscriptionStatus.APPROVED_BY_APA
    return repo.query_by_status_and_department(db, status.value)


def get_renewal_alerts(db: Session, actor: Actor, today=None) -> List[SubscriptionRecord]:
    """
    Active subscriptions inside their alert window, scoped to what the actor sees:
    own requests for employees, the department for HODs, everything for finance/admin.
    """
    today = today or utc_today()
    department = actor.department if actor.role == "hod" else None
    active = repo.query_by_status_and_department(db, SubscriptionStatus.ACTIVE.value, department)
    alerts = [s for s in active if should_alert(s, today)]
    if actor.role == "employee":
        alerts = [s for s in alerts if s.requested_by == actor.user_id]
    return sorted(alerts, key=lambda s: s.expiry_date)
