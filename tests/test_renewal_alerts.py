"""
Tests for the scheduled renewal alert job.
"""
from datetime import date, datetime, timezone

from autotrack.models import Notification
from autotrack.services.scheduler.renewal_alerts import ALERT_KIND, send_renewal_alerts
from autotrack.services.subscription import (
    PaymentDetails,
    apa_approve,
    hod_approve,
    record_payment,
    submit_request,
)
from autotrack.services.subscription import subscription_repository as repo

TODAY = date(2026, 9, 1)


def _active_subscription(db, actors, tool_name, expiry_date, alert_days=None):
    record = submit_request(
        db, actors["employee"], tool_name=tool_name, purpose="Daily work",
        cost="49.99", duration_months=1, alert_days=alert_days,
    )
    hod_approve(db, actors["hod"], record.id)
    apa_approve(db, actors["apa"], record.id)
    record_payment(db, actors["am"], record.id, PaymentDetails(mode="Card"))
    repo.update_subscription(db, record.id, {"expiry_date": expiry_date})
    db.commit()
    return record.id


def _alerts(db):
    return db.query(Notification).filter(Notification.kind == ALERT_KIND).all()


def test_alerts_requester_and_hod_once(db, session_factory, actors, users):
    due_id = _active_subscription(db, actors, "Zoom", datetime(2026, 9, 4, tzinfo=timezone.utc))
    _active_subscription(db, actors, "Asana", datetime(2026, 12, 1, tzinfo=timezone.utc))

    first = send_renewal_alerts(today=TODAY, session_factory=session_factory)

    assert first == {"checked": 2, "alerted": 1, "skipped": 0}
    alerts = _alerts(db)
    assert {a.user_id for a in alerts} == {users["employee"].id, users["hod"].id}
    assert all(a.subscription_id == due_id for a in alerts)
    assert "3 day(s)" in alerts[0].message

    second = send_renewal_alerts(today=TODAY, session_factory=session_factory)

    assert second == {"checked": 2, "alerted": 0, "skipped": 1}
    assert len(_alerts(db)) == 2


def test_respects_per_subscription_alert_days(db, session_factory, actors):
    _active_subscription(db, actors, "Canva", datetime(2026, 9, 8, tzinfo=timezone.utc), alert_days=5)

    result = send_renewal_alerts(today=TODAY, session_factory=session_factory)

    assert result["alerted"] == 0
    assert _alerts(db) == []


def test_expired_subscriptions_are_left_alone(db, session_factory, actors):
    sub_id = _active_subscription(db, actors, "Dropbox", datetime(2026, 8, 20, tzinfo=timezone.utc))

    result = send_renewal_alerts(today=TODAY, session_factory=session_factory)

    assert result["alerted"] == 0
    assert repo.get_subscription(db, sub_id).status == "Active"
