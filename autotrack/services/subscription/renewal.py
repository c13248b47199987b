"""
Expiry and renewal-window calculations.

Everything here is pure and takes `today` explicitly; nothing is cached on the
record. Expired is derived: a paid (Active) subscription whose expiry date is
before today.
"""
import calendar
from datetime import date, datetime, timezone
from typing import Optional

from autotrack.models.subscription import SubscriptionStatus
from autotrack.services.subscription.subscription_models import (
    RenewalWindow,
    SubscriptionRecord,
    as_utc,
)


def add_months(value: datetime, months: int) -> datetime:
    """Add calendar months, clamping to the last day of the target month."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def days_until_expiry(subscription: SubscriptionRecord, today: Optional[date] = None) -> Optional[int]:
    """Whole calendar days from today to the expiry date (negative once passed)."""
    if subscription.expiry_date is None:
        return None
    today = today or utc_today()
    return (as_utc(subscription.expiry_date).date() - today).days


def _in_alert_window(subscription: SubscriptionRecord, today: Optional[date]) -> bool:
    if subscription.status != SubscriptionStatus.ACTIVE.value:
        return False
    days = days_until_expiry(subscription, today)
    if days is None:
        return False
    return 0 <= days <= subscription.alert_days


def is_expired(subscription: SubscriptionRecord, today: Optional[date] = None) -> bool:
    if subscription.status != SubscriptionStatus.ACTIVE.value:
        return False
    days = days_until_expiry(subscription, today)
    return days is not None and days < 0


def effective_status(subscription: SubscriptionRecord, today: Optional[date] = None) -> str:
    """Stored status, or Expired for a paid subscription past its expiry date."""
    if is_expired(subscription, today):
        return SubscriptionStatus.EXPIRED.value
    return subscription.status


def is_renewable(subscription: SubscriptionRecord, today: Optional[date] = None) -> bool:
    """Gate for the Renew action: Active and expiring within alert_days (inclusive)."""
    return _in_alert_window(subscription, today)


def should_alert(subscription: SubscriptionRecord, today: Optional[date] = None) -> bool:
    """Whether the subscription belongs in renewal-alert lists."""
    return _in_alert_window(subscription, today)


def renewal_window(subscription: SubscriptionRecord, today: Optional[date] = None) -> RenewalWindow:
    today = today or utc_today()
    return RenewalWindow(
        effective_status=effective_status(subscription, today),
        days_until_expiry=days_until_expiry(subscription, today),
        is_renewable=is_renewable(subscription, today),
        should_alert=should_alert(subscription, today),
    )
