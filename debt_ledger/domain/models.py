"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

# Stored debt lifecycle status
DEBT_STATUS_PENDING = "pending"
DEBT_STATUS_PAID = "paid"
DEBT_STATUS_OVERDUE = "overdue"

DEBT_STATUSES = (DEBT_STATUS_PENDING, DEBT_STATUS_PAID, DEBT_STATUS_OVERDUE)

# Read-time urgency, never persisted
URGENCY_NORMAL = "normal"
URGENCY_DUE_TODAY = "due_today"
URGENCY_DUE_SOON = "due_soon"
URGENCY_OVERDUE = "overdue"

DUE_SOON_WINDOW_DAYS = 7


@dataclass(frozen=True)
class Identity:
    """Authenticated caller, taken from a verified bearer token"""

    id: int
    email: str


@dataclass
class RecordedPayment:
    """Payment row as written by the ledger"""

    id: int
    debt_id: int
    amount: Decimal
    payment_date: date
    payment_method: str
    reference: Optional[str]
    notes: Optional[str]
    created_at: Optional[datetime]


@dataclass
class PaymentApplication:
    """Outcome of applying one payment to a debt"""

    payment: RecordedPayment
    paid_amount: Decimal
    status: str


@dataclass
class DebtStatistics:
    """Per-user aggregate counts and sums"""

    total_debts: int
    total_amount: Decimal
    pending_count: int
    pending_amount: Decimal
    overdue_count: int
    overdue_amount: Decimal
    paid_count: int
    paid_amount: Decimal
