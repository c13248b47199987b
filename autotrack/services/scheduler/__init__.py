"""
Scheduler service for background jobs.
"""
from autotrack.services.scheduler.scheduler_service import (
    get_scheduler,
    start_scheduler,
    stop_scheduler,
)
from autotrack.services.scheduler.renewal_alerts import (
    send_renewal_alerts,
    add_renewal_alert_job,
)

__all__ = [
    "get_scheduler",
    "start_scheduler",
    "stop_scheduler",
    "send_renewal_alerts",
    "add_renewal_alert_job",
]
