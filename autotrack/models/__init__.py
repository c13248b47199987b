"""
Database models.
"""
from autotrack.models.user import User
from autotrack.models.subscription import Subscription, SubscriptionStatus
from autotrack.models.notification import Notification
from autotrack.models.audit_log import AuditLog

__all__ = [
    "User",
    "Subscription",
    "SubscriptionStatus",
    "Notification",
    "AuditLog",
]
