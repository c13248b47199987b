"""
Subscription workflow: request, approve, pay and renew software subscriptions.
"""
from autotrack.services.subscription.subscription_service import (
    submit_request,
    renew_subscription,
    hod_approve,
    hod_decline,
    apa_approve,
    apa_decline,
    record_payment,
    can_view,
    get_subscription_for_actor,
    get_finance_queue,
    get_renewal_alerts,
    PAYMENT_MODES,
)
from autotrack.services.subscription.subscription_models import (
    Actor,
    PaymentDetails,
    SubscriptionRecord,
    RenewalWindow,
)
from autotrack.services.subscription.renewal import (
    add_months,
    days_until_expiry,
    effective_status,
    is_expired,
    is_renewable,
    should_alert,
    renewal_window,
)

__all__ = [
    "submit_request",
    "renew_subscription",
    "hod_approve",
    "hod_decline",
    "apa_approve",
    "apa_decline",
    "record_payment",
    "can_view",
    "get_subscription_for_actor",
    "get_finance_queue",
    "get_renewal_alerts",
    "PAYMENT_MODES",
    "Actor",
    "PaymentDetails",
    "SubscriptionRecord",
    "RenewalWindow",
    "add_months",
    "days_until_expiry",
    "effective_status",
    "is_expired",
    "is_renewable",
    "should_alert",
    "renewal_window",
]
