"""Data access layer for users, debts, payments, banks and notifications"""

from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import and_, case, func, or_
from sqlalchemy.orm import Session

from debt_ledger.domain.models import (
    DEBT_STATUS_OVERDUE,
    DEBT_STATUS_PAID,
    DEBT_STATUS_PENDING,
    DebtStatistics,
)
from debt_ledger.domain.status import settle_status
from debt_ledger.infrastructure.database.models import Bank, Debt, Notification, Payment, User
from debt_ledger.utils.date_utils import current_month_bounds, month_bounds

# Fields a client may change through a direct debt edit.
# paid_amount and status belong to the payment ledger.
EDITABLE_DEBT_FIELDS = ("bank_name", "description", "amount", "due_date", "frequency")

CENTS = Decimal("0.01")


def _money(value) -> Decimal:
    """Aggregates come back as float on some backends; normalise to cents"""
    return Decimal(str(value)).quantize(CENTS)


def _overdue_clause(today: date):
    """Unpaid and past due, or explicitly stored as overdue"""
    return or_(
        Debt.status == DEBT_STATUS_OVERDUE,
        and_(Debt.status != DEBT_STATUS_PAID, Debt.due_date < today),
    )


class UserRepository:
    """Repository for registered users"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def create_user(self, name: str, email: str, password_hash: str, avatar: str) -> User:
        user = User(name=name, email=email, password_hash=password_hash, avatar=avatar)
        self.db.add(user)
        self.db.flush()  # Surface unique-email violations before commit
        return user


class DebtRepository:
    """Repository for debts, always scoped by owner"""

    def __init__(self, db: Session):
        self.db = db

    def get_owned(self, debt_id: int, owner_id: int) -> Optional[Debt]:
        return (
            self.db.query(Debt)
            .filter(Debt.id == debt_id, Debt.user_id == owner_id)
            .first()
        )

    def get_owned_for_update(self, debt_id: int, owner_id: int) -> Optional[Debt]:
        """
        Fetch a debt under an exclusive row lock (SELECT ... FOR UPDATE).

        The lock is held until the surrounding transaction commits or rolls
        back. populate_existing() overwrites any copy already in the session
        so the balance read is the locked one.

        SQLite ignores FOR UPDATE, so there a no-op write on the row opens the
        transaction and takes the database write lock before the read.
        """
        if self.db.get_bind().dialect.name == "sqlite":
            (
                self.db.query(Debt)
                .filter(Debt.id == debt_id, Debt.user_id == owner_id)
                .update({Debt.paid_amount: Debt.paid_amount}, synchronize_session=False)
            )

        return (
            self.db.query(Debt)
            .filter(Debt.id == debt_id, Debt.user_id == owner_id)
            .with_for_update()
            .populate_existing()
            .first()
        )

    def update_paid_state(self, debt: Debt, paid_amount: Decimal, status: str) -> Debt:
        debt.paid_amount = paid_amount
        debt.status = status
        self.db.flush()
        return debt

    def list_for_owner(
        self,
        owner_id: int,
        today: date,
        status: Optional[str] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> List[Debt]:
        """
        List a user's debts ordered by due date.

        With month and year, only debts due in that month. Without them, the
        default view: debts due this month plus every overdue one.
        """
        query = self.db.query(Debt).filter(Debt.user_id == owner_id)

        if status == DEBT_STATUS_OVERDUE:
            query = query.filter(_overdue_clause(today))
        elif status == DEBT_STATUS_PENDING:
            query = query.filter(Debt.status == status, ~_overdue_clause(today))
        elif status:
            query = query.filter(Debt.status == status)

        if month and year:
            first, last = month_bounds(year, month)
            query = query.filter(Debt.due_date.between(first, last))
        else:
            first, last = current_month_bounds(today)
            query = query.filter(or_(Debt.due_date.between(first, last), _overdue_clause(today)))

        return query.order_by(Debt.due_date.asc(), Debt.id.asc()).all()

    def create_debt(
        self,
        owner_id: int,
        bank_name: str,
        description: str,
        amount: Decimal,
        due_date: date,
        frequency: str,
    ) -> Debt:
        debt = Debt(
            user_id=owner_id,
            bank_name=bank_name,
            description=description,
            amount=amount,
            paid_amount=Decimal("0"),
            due_date=due_date,
            frequency=frequency,
            status=DEBT_STATUS_PENDING,
        )
        self.db.add(debt)
        self.db.flush()
        return debt

    def update_debt(self, debt_id: int, owner_id: int, changes: Dict[str, Any]) -> Optional[Debt]:
        """
        Apply the non-null editable fields in `changes`.

        A new principal re-settles the debt against what is already paid.
        """
        debt = self.get_owned(debt_id, owner_id)
        if debt is None:
            return None

        for field in EDITABLE_DEBT_FIELDS:
            value = changes.get(field)
            if value is not None:
                setattr(debt, field, value)

        if changes.get("amount") is not None:
            settled = settle_status(debt.paid_amount, debt.amount)
            # A stored overdue flag survives unless the debt is now covered
            if settled == DEBT_STATUS_PAID or debt.status == DEBT_STATUS_PAID:
                debt.status = settled

        self.db.flush()
        return debt

    def delete_owned(self, debt_id: int, owner_id: int) -> bool:
        """Delete a debt together with its payment history"""
        debt = self.get_owned(debt_id, owner_id)
        if debt is None:
            return False

        self.db.delete(debt)
        self.db.flush()
        return True

    def get_statistics(self, owner_id: int, today: date) -> DebtStatistics:
        """Aggregate counts and sums by status for one user"""
        remaining = Debt.amount - Debt.paid_amount
        is_paid = Debt.status == DEBT_STATUS_PAID
        is_overdue = _overdue_clause(today)
        is_pending = and_(~is_paid, ~is_overdue)

        row = (
            self.db.query(
                func.count(Debt.id),
                func.coalesce(func.sum(Debt.amount), 0),
                func.coalesce(func.sum(case((is_pending, 1), else_=0)), 0),
                func.coalesce(func.sum(case((is_pending, remaining), else_=0)), 0),
                func.coalesce(func.sum(case((is_overdue, 1), else_=0)), 0),
                func.coalesce(func.sum(case((is_overdue, remaining), else_=0)), 0),
                func.coalesce(func.sum(case((is_paid, 1), else_=0)), 0),
                func.coalesce(func.sum(Debt.paid_amount), 0),
            )
            .filter(Debt.user_id == owner_id)
            .one()
        )

        return DebtStatistics(
            total_debts=int(row[0]),
            total_amount=_money(row[1]),
            pending_count=int(row[2]),
            pending_amount=_money(row[3]),
            overdue_count=int(row[4]),
            overdue_amount=_money(row[5]),
            paid_count=int(row[6]),
            paid_amount=_money(row[7]),
        )


class PaymentRepository:
    """Repository for the append-only payment history"""

    def __init__(self, db: Session):
        self.db = db

    def create_payment(
        self,
        debt_id: int,
        amount: Decimal,
        payment_date: date,
        payment_method: str,
        reference: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Payment:
        payment = Payment(
            debt_id=debt_id,
            amount=amount,
            payment_date=payment_date,
            payment_method=payment_method,
            reference=reference,
            notes=notes,
        )
        self.db.add(payment)
        self.db.flush()  # Get ID without committing
        return payment

    def list_for_debt(self, debt_id: int) -> List[Payment]:
        """Payment history, newest payment date first"""
        return (
            self.db.query(Payment)
            .filter(Payment.debt_id == debt_id)
            .order_by(Payment.payment_date.desc(), Payment.id.desc())
            .all()
        )

    def total_for_debt(self, debt_id: int) -> Decimal:
        """Sum of every payment recorded against a debt"""
        total = (
            self.db.query(func.coalesce(func.sum(Payment.amount), 0))
            .filter(Payment.debt_id == debt_id)
            .scalar()
        )
        return _money(total)


class BankRepository:
    """Repository for the bank catalogue"""

    def __init__(self, db: Session):
        self.db = db

    def list_active(self) -> List[Bank]:
        return (
            self.db.query(Bank)
            .filter(Bank.active.is_(True))
            .order_by(Bank.name.asc())
            .all()
        )

    def upsert_bank(self, name: str, code: str, logo_url: Optional[str] = None) -> Bank:
        """Insert a bank by code, or refresh its name and logo"""
        bank = self.db.query(Bank).filter(Bank.code == code).first()
        if bank is None:
            bank = Bank(name=name, code=code, logo_url=logo_url, active=True)
            self.db.add(bank)
        else:
            bank.name = name
            bank.logo_url = logo_url
        self.db.flush()
        return bank


class NotificationRepository:
    """Repository for user notifications"""

    def __init__(self, db: Session):
        self.db = db

    def list_for_user(self, user_id: int, only_unread: bool = False) -> List[Notification]:
        query = self.db.query(Notification).filter(Notification.user_id == user_id)
        if only_unread:
            query = query.filter(Notification.is_read.is_(False))
        return query.order_by(Notification.created_at.desc(), Notification.id.desc()).all()

    def create_notification(
        self,
        user_id: int,
        type: str,
        title: str,
        message: str,
        debt_id: Optional[int] = None,
    ) -> Notification:
        notification = Notification(
            user_id=user_id,
            debt_id=debt_id,
            type=type,
            title=title,
            message=message,
            is_read=False,
        )
        self.db.add(notification)
        self.db.flush()
        return notification

    def mark_read(self, notification_id: int, user_id: int) -> bool:
        updated = (
            self.db.query(Notification)
            .filter(Notification.id == notification_id, Notification.user_id == user_id)
            .update({Notification.is_read: True}, synchronize_session="fetch")
        )
        return updated > 0
