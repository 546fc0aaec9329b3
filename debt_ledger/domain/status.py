"""Debt status rules - settlement threshold and read-time urgency"""

from datetime import date, datetime
from decimal import Decimal
from typing import Union

from debt_ledger.domain.models import (
    DEBT_STATUS_PAID,
    DEBT_STATUS_PENDING,
    DUE_SOON_WINDOW_DAYS,
    URGENCY_DUE_SOON,
    URGENCY_DUE_TODAY,
    URGENCY_NORMAL,
    URGENCY_OVERDUE,
)


def settle_status(paid_amount: Decimal, principal: Decimal) -> str:
    """
    Stored status after a payment.

    Strict threshold: a debt is paid once paid_amount reaches the principal.
    There is no "partially paid" state, and overpayment still reads as paid.
    """
    return DEBT_STATUS_PAID if paid_amount >= principal else DEBT_STATUS_PENDING


def classify_urgency(due_date: date, stored_status: str, now: Union[date, datetime]) -> str:
    """
    Derive display urgency from the due date.

    Rules (only for debts not yet paid):
    - due today: due_today
    - due within the next 7 days: due_soon
    - due date already passed: overdue
    - otherwise: normal

    Comparison is by calendar day, so `now` may be a date or a datetime.
    """
    if stored_status == DEBT_STATUS_PAID:
        return URGENCY_NORMAL

    today = now.date() if isinstance(now, datetime) else now
    days_left = (due_date - today).days

    if days_left == 0:
        return URGENCY_DUE_TODAY
    if 0 <= days_left <= DUE_SOON_WINDOW_DAYS:
        return URGENCY_DUE_SOON
    if days_left < 0:
        return URGENCY_OVERDUE
    return URGENCY_NORMAL
