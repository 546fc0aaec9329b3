"""POST /payments - apply a payment to a debt; GET /payments/debt/{id} - payment history"""

import time
import logging
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from debt_ledger.api.dependencies import get_current_identity, get_request_id
from debt_ledger.api.v1.schemas import (
    PaymentHistoryResponse,
    PaymentRequest,
    PaymentResponse,
    PaymentSchema,
)
from debt_ledger.application.ledger import PaymentLedger
from debt_ledger.domain.exceptions import (
    DebtNotFoundError,
    StorageFailure,
    ValidationFailure,
)
from debt_ledger.domain.models import DEBT_STATUS_PAID, Identity
from debt_ledger.infrastructure.database.repositories import DebtRepository, PaymentRepository
from debt_ledger.infrastructure.database.session import get_db
from debt_ledger.infrastructure.observability.logging import log_payment
from debt_ledger.infrastructure.observability.metrics import record_payment

router = APIRouter()


@router.post("", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
def create_payment(
    request_body: PaymentRequest,
    request: Request,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """
    Apply a payment to one of the caller's debts.

    Flow:
    1. Lock the debt row (owner-scoped)
    2. Add the amount to paid_amount; status becomes paid once it covers the principal
    3. Insert the payment and update the debt in one transaction
    4. Return the payment with the debt's new paid_amount and status
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        result = PaymentLedger(db).apply_payment(
            owner=identity,
            debt_id=request_body.debt_id,
            amount=request_body.amount,
            payment_date=request_body.payment_date,
            method=request_body.payment_method,
            reference=request_body.reference,
            notes=request_body.notes,
        )

    except ValidationFailure as e:
        record_payment("invalid")
        logging.warning(f"Payment rejected: {e}", extra={"request_id": request_id})
        raise

    except DebtNotFoundError:
        record_payment("not_found")
        logging.warning(
            "Payment for unknown debt",
            extra={"request_id": request_id, "user_id": identity.id, "debt_id": request_body.debt_id},
        )
        raise

    except StorageFailure:
        record_payment("failed")
        raise

    duration_ms = (time.time() - start_time) * 1000
    record_payment("applied", result.payment.amount, settled=result.status == DEBT_STATUS_PAID)
    log_payment(request_id, identity.id, request_body.debt_id, result.payment.amount, result.status, duration_ms)

    return PaymentResponse(
        id=result.payment.id,
        debt_id=result.payment.debt_id,
        amount=result.payment.amount,
        payment_date=result.payment.payment_date,
        payment_method=result.payment.payment_method,
        reference=result.payment.reference,
        notes=result.payment.notes,
        created_at=result.payment.created_at,
        paid_amount=result.paid_amount,
        status=result.status,
    )


@router.get("/debt/{debt_id}", response_model=PaymentHistoryResponse)
def get_payment_history(
    debt_id: int,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """Payment history of one of the caller's debts, newest first"""
    if DebtRepository(db).get_owned(debt_id, identity.id) is None:
        raise DebtNotFoundError()

    payments = PaymentRepository(db).list_for_debt(debt_id)
    return PaymentHistoryResponse(payments=[PaymentSchema.model_validate(p) for p in payments])
