"""
Renewal alert job.

This job runs daily to:
- Find Active subscriptions inside their renewal alert window
- Notify the requester and the department HODs once per subscription

It never changes subscription records; Expired stays a read-time status.
"""
import logging
from datetime import date
from typing import Optional
from autotrack.core.config import RENEWAL_ALERT_SCHEDULE
from autotrack.core.database import SessionLocal
from autotrack.models.subscription import SubscriptionStatus
from autotrack.services.notification import add_notification, get_department_hod_ids, has_notification
from autotrack.services.subscription.renewal import days_until_expiry, should_alert, utc_today
from autotrack.services.subscription.subscription_repository import query_by_status_and_department

logger = logging.getLogger(__name__)

JOB_ID = "renewal_alerts"
ALERT_KIND = "renewal_alert"


def send_renewal_alerts(today: Optional[date] = None, session_factory=SessionLocal) -> dict:
    """
    Create renewal alert notifications for subscriptions nearing expiry.

    Args:
        today: Date to evaluate the alert window against (defaults to UTC today)
        session_factory: Callable returning a database session

    Returns:
        Counts of subscriptions checked, alerted and skipped
    """
    today = today or utc_today()
    db = session_factory()
    try:
        active = query_by_status_and_department(db, SubscriptionStatus.ACTIVE.value)
        due = [s for s in active if should_alert(s, today)]

        alerted_count = 0
        skipped_count = 0
        for subscription in due:
            try:
                days = days_until_expiry(subscription, today)
                recipients = [subscription.requested_by]
                recipients += [
                    hod_id for hod_id in get_department_hod_ids(db, subscription.department)
                    if hod_id != subscription.requested_by
                ]

                created = 0
                for user_id in recipients:
                    if has_notification(db, user_id, subscription.id, ALERT_KIND):
                        continue
                    add_notification(
                        db,
                        user_id,
                        f"{subscription.tool_name} ({subscription.department}) expires in {days} day(s) "
                        f"on {subscription.expiry_date.date().isoformat()}. Please take renewal action.",
                        ALERT_KIND,
                        subscription.id,
                    )
                    created += 1
                db.commit()

                if created:
                    alerted_count += 1
                    logger.info(f"Renewal alert sent for subscription {subscription.id} ({days} days left)")
                else:
                    skipped_count += 1
            except Exception as e:
                logger.error(f"Error sending renewal alert for subscription {subscription.id}: {e}", exc_info=True)
                db.rollback()
                continue

        logger.info(
            f"Renewal alert job completed: {len(active)} active, {alerted_count} alerted, {skipped_count} already alerted"
        )
        return {
            "checked": len(active),
            "alerted": alerted_count,
            "skipped": skipped_count,
        }
    except Exception as e:
        logger.error(f"Error in renewal alert job: {e}", exc_info=True)
        db.rollback()
        raise
    finally:
        db.close()


def add_renewal_alert_job():
    """Add renewal alert job to scheduler (daily at RENEWAL_ALERT_SCHEDULE, UTC)."""
    from autotrack.services.scheduler.scheduler_service import get_scheduler
    from apscheduler.triggers.cron import CronTrigger

    hour, minute = map(int, RENEWAL_ALERT_SCHEDULE.split(":"))
    scheduler = get_scheduler()
    scheduler.add_job(
        send_renewal_alerts,
        trigger=CronTrigger(hour=hour, minute=minute, timezone="UTC"),
        id=JOB_ID,
        replace_existing=True,
        max_instances=1,
    )

    logger.info(f"Added renewal alert job (daily at {RENEWAL_ALERT_SCHEDULE} UTC)")
