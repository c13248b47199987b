"""
Configuration management.
Loads from config_local.py (gitignored) for secrets, with defaults.
"""
from typing import Optional

# Try to import local config (gitignored)
try:
    from autotrack.config_local import (
        DATABASE_DSN,
        SESSION_COOKIE_NAME,
        SESSION_SECRET,
        SESSION_TTL_HOURS,
        ENABLE_RENEWAL_ALERT_JOB,
        RENEWAL_ALERT_SCHEDULE,
        CORS_ORIGINS,
    )
    # Workflow tunables are optional in local config
    try:
        from autotrack.config_local import DEFAULT_ALERT_DAYS, MIN_ALERT_DAYS, MAX_ALERT_DAYS
    except ImportError:
        DEFAULT_ALERT_DAYS = 10
        MIN_ALERT_DAYS = 1
        MAX_ALERT_DAYS = 60
except ImportError:
    # Fallback defaults (local SQLite database, unsigned dev secret)
    DATABASE_DSN: str = "sqlite:///./autotrack.db"
    SESSION_COOKIE_NAME: str = "autotrack_session"
    SESSION_SECRET: Optional[str] = None
    SESSION_TTL_HOURS: int = 24
    ENABLE_RENEWAL_ALERT_JOB: bool = False
    RENEWAL_ALERT_SCHEDULE: str = "08:00"  # HH:MM, UTC
    CORS_ORIGINS: list = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
    DEFAULT_ALERT_DAYS: int = 10  # Days before expiry when renewal alerts start
    MIN_ALERT_DAYS: int = 1
    MAX_ALERT_DAYS: int = 60


def get_settings():
    """Return settings object (for FastAPI dependency injection if needed)."""
    return type("Settings", (), {
        "database_dsn": DATABASE_DSN,
        "session_cookie_name": SESSION_COOKIE_NAME,
        "session_secret": SESSION_SECRET,
        "session_ttl_hours": SESSION_TTL_HOURS,
        "enable_renewal_alert_job": ENABLE_RENEWAL_ALERT_JOB,
        "renewal_alert_schedule": RENEWAL_ALERT_SCHEDULE,
        "cors_origins": CORS_ORIGINS,
        "default_alert_days": DEFAULT_ALERT_DAYS,
        "min_alert_days": MIN_ALERT_DAYS,
        "max_alert_days": MAX_ALERT_DAYS,
    })()
