"""Payment ledger - applies a payment to a debt as one atomic unit"""

import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from debt_ledger.config import settings
from debt_ledger.domain.exceptions import DebtNotFoundError, StorageFailure, ValidationFailure
from debt_ledger.domain.models import Identity, PaymentApplication, RecordedPayment
from debt_ledger.domain.status import settle_status
from debt_ledger.infrastructure.database.models import Payment
from debt_ledger.infrastructure.database.repositories import CENTS, DebtRepository, PaymentRepository

logger = logging.getLogger(__name__)


class PaymentLedger:
    """
    Couples the payment insert with the debt balance/status update.

    The session passed in must not have pending work: apply_payment owns
    the transaction and either commits both writes or rolls both back.
    """

    def __init__(self, db: Session):
        self.db = db
        self.debts = DebtRepository(db)
        self.payments = PaymentRepository(db)

    def apply_payment(
        self,
        owner: Identity,
        debt_id: int,
        amount: Optional[Decimal],
        payment_date: Optional[date],
        method: Optional[str] = None,
        reference: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> PaymentApplication:
        """
        Record a payment and bring the debt's paid_amount/status up to date.

        Flow:
        1. Validate required fields (no storage access on failure)
        2. Lock the debt row, scoped to the owner
        3. new paid_amount = current + amount; paid once it reaches the principal
        4. Insert payment, update debt
        5. Commit both, or roll back both

        Raises:
            ValidationFailure: amount/payment_date missing, amount not positive,
                or amount finer than a cent
            DebtNotFoundError: debt missing or owned by someone else
            StorageFailure: persistence error; nothing was written
        """
        if debt_id is None or amount is None or payment_date is None:
            raise ValidationFailure("Debt, amount and payment date are required")
        amount = _as_money(amount)

        try:
            debt = self.debts.get_owned_for_update(debt_id, owner.id)
            if debt is None:
                self.db.rollback()
                raise DebtNotFoundError()

            new_paid_amount = debt.paid_amount + amount
            new_status = settle_status(new_paid_amount, debt.amount)

            payment = self.payments.create_payment(
                debt_id=debt.id,
                amount=amount,
                payment_date=payment_date,
                payment_method=method or settings.default_payment_method,
                reference=reference,
                notes=notes,
            )
            self.debts.update_paid_state(debt, new_paid_amount, new_status)

            self.db.commit()

        except DebtNotFoundError:
            raise

        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                f"Payment rolled back: {e}",
                extra={"user_id": owner.id, "debt_id": debt_id},
            )
            raise StorageFailure("Payment could not be recorded") from e

        except BaseException:
            # Interrupted mid-flight: nothing may stay half-written
            self.db.rollback()
            raise

        return PaymentApplication(
            payment=_to_recorded(payment),
            paid_amount=new_paid_amount,
            status=new_status,
        )


def _as_money(amount) -> Decimal:
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except InvalidOperation as e:
        raise ValidationFailure(f"Invalid payment amount: {amount!r}") from e

    if not value.is_finite() or value <= 0:
        raise ValidationFailure("Payment amount must be greater than zero")

    # Stored as Numeric(12,2); a sub-cent amount would round on write
    cents = value.quantize(CENTS)
    if cents != value:
        raise ValidationFailure("Payment amount cannot have more than two decimal places")
    return cents


def _to_recorded(payment: Payment) -> RecordedPayment:
    return RecordedPayment(
        id=payment.id,
        debt_id=payment.debt_id,
        amount=payment.amount,
        payment_date=payment.payment_date,
        payment_method=payment.payment_method,
        reference=payment.reference,
        notes=payment.notes,
        created_at=payment.created_at,
    )
