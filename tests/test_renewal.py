"""
Tests for expiry arithmetic and the renewal window predicates.
"""
from datetime import date, datetime, timezone
from decimal import Decimal
from types import SimpleNamespace

import pytest

from autotrack.services.subscription import (
    SubscriptionRecord,
    add_months,
    days_until_expiry,
    effective_status,
    is_expired,
    is_renewable,
    renewal_window,
    should_alert,
)

TODAY = date(2026, 5, 10)


def _record(**overrides) -> SubscriptionRecord:
    fields = dict(
        id=1,
        tool_name="Figma",
        vendor_name="Figma Inc",
        department="Engineering",
        purpose="Design reviews",
        cost=Decimal("120.00"),
        duration_months=12,
        alert_days=10,
        invoice_url=None,
        status="Active",
        remarks=None,
        request_date=datetime(2025, 5, 1, tzinfo=timezone.utc),
        approval_date=None,
        apa_approval_date=None,
        payment_date=datetime(2025, 5, 15, tzinfo=timezone.utc),
        expiry_date=datetime(2026, 5, 15, tzinfo=timezone.utc),
        payment_mode="UPI",
        transaction_id=None,
        requested_by=7,
        approved_by=None,
        apa_approved_by=None,
        paid_by=None,
        renewal_of_id=None,
        version=4,
    )
    fields.update(overrides)
    return SubscriptionRecord(**fields)


class TestAddMonths:
    def test_same_day_next_year(self):
        assert add_months(datetime(2026, 3, 15, 9, 30), 12) == datetime(2027, 3, 15, 9, 30)

    def test_clamps_to_end_of_shorter_month(self):
        assert add_months(datetime(2026, 1, 31), 1) == datetime(2026, 2, 28)
        assert add_months(datetime(2028, 1, 31), 1) == datetime(2028, 2, 29)

    def test_crosses_year_boundary(self):
        assert add_months(datetime(2026, 11, 30), 3) == datetime(2027, 2, 28)

    def test_keeps_timezone(self):
        result = add_months(datetime(2026, 6, 1, tzinfo=timezone.utc), 6)
        assert result.tzinfo is timezone.utc


class TestPredicates:
    def test_days_until_expiry(self):
        assert days_until_expiry(_record(), TODAY) == 5
        assert days_until_expiry(_record(expiry_date=None), TODAY) is None

    def test_naive_expiry_is_read_as_utc(self):
        assert days_until_expiry(_record(expiry_date=datetime(2026, 5, 15)), TODAY) == 5

    def test_inside_alert_window(self):
        record = _record()
        assert should_alert(record, TODAY)
        assert is_renewable(record, TODAY)

    def test_outside_alert_window(self):
        record = _record(alert_days=3)
        assert not should_alert(record, TODAY)
        assert not is_renewable(record, TODAY)

    @pytest.mark.parametrize("days_left", [0, 10])
    def test_window_bounds_are_inclusive(self, days_left):
        expiry = datetime(2026, 5, 10 + days_left, tzinfo=timezone.utc)
        assert should_alert(_record(expiry_date=expiry), TODAY)

    def test_expired_record_is_not_alerted(self):
        record = _record(expiry_date=datetime(2026, 5, 9, tzinfo=timezone.utc))
        assert is_expired(record, TODAY)
        assert effective_status(record, TODAY) == "Expired"
        assert not should_alert(record, TODAY)
        assert not is_renewable(record, TODAY)

    @pytest.mark.parametrize("status", ["Pending", "Approved by HOD", "Approved by APA", "Declined by HOD"])
    def test_unpaid_records_never_expire_or_alert(self, status):
        record = _record(status=status, expiry_date=datetime(2026, 5, 1, tzinfo=timezone.utc))
        assert not is_expired(record, TODAY)
        assert effective_status(record, TODAY) == status
        assert not should_alert(record, TODAY)

    def test_renewal_window_bundles_predicates(self):
        window = renewal_window(_record(), TODAY)
        assert window.effective_status == "Active"
        assert window.days_until_expiry == 5
        assert window.is_renewable
        assert window.should_alert


class TestFromDbRow:
    def _row(self, **overrides):
        record = _record(**overrides)
        return SimpleNamespace(**{**vars(record), "cost": "120.00"})

    def test_legacy_null_alert_days_defaults_to_ten(self):
        record = SubscriptionRecord.from_db_row(self._row(alert_days=None))
        assert record.alert_days == 10
        assert record.cost == Decimal("120.00")

    def test_legacy_row_uses_default_alert_window(self):
        record = SubscriptionRecord.from_db_row(
            self._row(alert_days=None, expiry_date=datetime(2026, 5, 20))
        )
        assert is_renewable(record, TODAY)
        assert not is_renewable(record, date(2026, 5, 9))
