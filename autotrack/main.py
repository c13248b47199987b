"""
FastAPI application entry point.
"""
import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from autotrack.api import health, auth, subscriptions, hod, finance, notifications
from autotrack.api.admin import subscriptions_router as admin_subscriptions_router
from autotrack.api.admin import users_router as admin_users_router
from autotrack.core.config import get_settings
from autotrack.core.errors import (
    WorkflowError,
    NotFoundError,
    InvalidTransitionError,
    UnauthorizedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

app_settings = get_settings()

app = FastAPI(
    title="AutoTrack Pro API",
    description="Software subscription requests, approvals, payments and renewals",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=app_settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router, tags=["health"])
app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(subscriptions.router, prefix="/api/subscriptions", tags=["subscriptions"])
app.include_router(hod.router, prefix="/api/hod", tags=["hod"])
app.include_router(finance.router, prefix="/api/finance", tags=["finance"])
app.include_router(notifications.router, prefix="/api/notifications", tags=["notifications"])
app.include_router(admin_subscriptions_router, prefix="/api/admin", tags=["admin"])
app.include_router(admin_users_router, prefix="/api/admin", tags=["admin"])


_ERROR_STATUS_CODES = {
    NotFoundError: 404,
    UnauthorizedError: 403,
    InvalidTransitionError: 409,
    ValidationError: 422,
}


@app.exception_handler(WorkflowError)
async def workflow_exception_handler(request: Request, exc: WorkflowError):
    """Map typed workflow failures to HTTP status codes."""
    status_code = next(
        (code for error_type, code in _ERROR_STATUS_CODES.items() if isinstance(exc, error_type)),
        400,
    )
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


@app.on_event("startup")
async def startup_event():
    """Start the renewal alert scheduler when enabled."""
    if not app_settings.enable_renewal_alert_job:
        logger.info("Renewal alert job disabled (ENABLE_RENEWAL_ALERT_JOB=False)")
        return

    from autotrack.services.scheduler import start_scheduler
    try:
        start_scheduler()
    except Exception as e:
        logger.error(f"Could not start scheduler: {e}", exc_info=True)


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown."""
    from autotrack.services.scheduler import stop_scheduler
    stop_scheduler()
