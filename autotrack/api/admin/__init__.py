"""
Admin API endpoints.
"""
from autotrack.api.admin.subscriptions import router as subscriptions_router
from autotrack.api.admin.users import router as users_router

__all__ = ["subscriptions_router", "users_router"]
