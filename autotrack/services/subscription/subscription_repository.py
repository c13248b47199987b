"""
Persistence for subscription records.

Functions here only stage changes on the session; the calling service decides
when to commit so that a transition, its audit row and its notifications land
together.
"""
from typing import Optional, List, Dict, Any
from sqlalchemy.orm import Session
from autotrack.models.subscription import Subscription
from autotrack.services.subscription.subscription_models import SubscriptionRecord


def create_subscription(db: Session, fields: Dict[str, Any]) -> int:
    """Insert a new subscription row and return its id."""
    row = Subscription(**fields)
    db.add(row)
    db.flush()
    return row.id


def get_subscription(db: Session, subscription_id: int) -> Optional[SubscriptionRecord]:
    """Get subscription by ID (always re-read from the database)."""
    row = db.get(Subscription, subscription_id, populate_existing=True)
    if not row:
        return None
    return SubscriptionRecord.from_db_row(row)


def update_subscription(
    db: Session,
    subscription_id: int,
    fields: Dict[str, Any],
    expected_status: Optional[str] = None,
    expected_version: Optional[int] = None,
) -> bool:
    """
    Apply a partial update, optionally as compare-and-swap.

    Args:
        db: Database session
        subscription_id: Subscription ID
        fields: Column values to set
        expected_status: Only update if the stored status still equals this
        expected_version: Only update if the stored version still equals this

    Returns:
        True if a row was updated, False if the id is missing or a guard failed
    """
    query = db.query(Subscription).filter(Subscription.id == subscription_id)
    if expected_status is not None:
        query = query.filter(Subscription.status == expected_status)
    if expected_version is not None:
        query = query.filter(Subscription.version == expected_version)

    values = dict(fields)
    values["version"] = Subscription.version + 1
    updated = query.update(values, synchronize_session=False)
    return updated > 0


def query_by_status_and_department(
    db: Session,
    status: str,
    department: Optional[str] = None,
) -> List[SubscriptionRecord]:
    """Subscriptions in a given stored status, optionally scoped to one department."""
    query = db.query(Subscription).filter(Subscription.status == status)
    if department is not None:
        query = query.filter(Subscription.department == department)
    rows = query.order_by(Subscription.request_date.asc(), Subscription.id.asc()).all()
    return [SubscriptionRecord.from_db_row(row) for row in rows]


def query_by_renewal_of(db: Session, source_id: int) -> List[SubscriptionRecord]:
    """Renewal requests created from a given subscription, oldest first."""
    rows = (
        db.query(Subscription)
        .filter(Subscription.renewal_of_id == source_id)
        .order_by(Subscription.id.asc())
        .all()
    )
    return [SubscriptionRecord.from_db_row(row) for row in rows]


def query_by_requester(db: Session, user_id: int) -> List[SubscriptionRecord]:
    rows = (
        db.query(Subscription)
        .filter(Subscription.requested_by == user_id)
        .order_by(Subscription.request_date.desc(), Subscription.id.desc())
        .all()
    )
    return [SubscriptionRecord.from_db_row(row) for row in rows]


def query_all(
    db: Session,
    status: Optional[str] = None,
    department: Optional[str] = None,
    limit: int = 100,
    offset: int = 0,
) -> List[SubscriptionRecord]:
    """All subscriptions, newest first, with optional filters (admin/finance views)."""
    query = db.query(Subscription)
    if status is not None:
        query = query.filter(Subscription.status == status)
    if department is not None:
        query = query.filter(Subscription.department == department)
    rows = (
        query.order_by(Subscription.request_date.desc(), Subscription.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return [SubscriptionRecord.from_db_row(row) for row in rows]
