"""Unit tests for settlement and urgency rules"""

import pytest
from datetime import date, datetime, timedelta
from decimal import Decimal
from debt_ledger.domain.status import classify_urgency, settle_status


TODAY = date(2024, 5, 15)


def test_due_today():
    assert classify_urgency(TODAY, "pending", TODAY) == "due_today"


def test_due_in_three_days_is_due_soon():
    assert classify_urgency(TODAY + timedelta(days=3), "pending", TODAY) == "due_soon"


def test_due_soon_window_edges():
    """One week ahead is still due_soon, eight days is normal"""
    assert classify_urgency(TODAY + timedelta(days=1), "pending", TODAY) == "due_soon"
    assert classify_urgency(TODAY + timedelta(days=7), "pending", TODAY) == "due_soon"
    assert classify_urgency(TODAY + timedelta(days=8), "pending", TODAY) == "normal"


def test_past_due_is_overdue():
    assert classify_urgency(TODAY - timedelta(days=1), "pending", TODAY) == "overdue"
    assert classify_urgency(TODAY - timedelta(days=90), "overdue", TODAY) == "overdue"


@pytest.mark.parametrize("offset", [-30, -1, 0, 3, 7, 60])
def test_paid_is_always_normal(offset):
    assert classify_urgency(TODAY + timedelta(days=offset), "paid", TODAY) == "normal"


def test_datetime_now_compares_by_calendar_day():
    """Late in the day a debt due today is still due_today, not overdue"""
    late_evening = datetime(2024, 5, 15, 23, 59)
    assert classify_urgency(TODAY, "pending", late_evening) == "due_today"
    assert classify_urgency(TODAY - timedelta(days=1), "pending", late_evening) == "overdue"


def test_settle_status_threshold():
    assert settle_status(Decimal("999.99"), Decimal("1000.00")) == "pending"
    assert settle_status(Decimal("1000.00"), Decimal("1000.00")) == "paid"
    assert settle_status(Decimal("1200.00"), Decimal("1000.00")) == "paid"
