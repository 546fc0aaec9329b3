"""Owner-scoped debt CRUD: /debts"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from debt_ledger.api.dependencies import get_current_identity
from debt_ledger.api.v1.schemas import (
    DebtCreateRequest,
    DebtListResponse,
    DebtResponse,
    DebtUpdateRequest,
)
from debt_ledger.config import settings
from debt_ledger.domain.exceptions import DebtNotFoundError, ValidationFailure
from debt_ledger.domain.models import DEBT_STATUSES, Identity
from debt_ledger.domain.status import classify_urgency
from debt_ledger.infrastructure.database.models import Debt
from debt_ledger.infrastructure.database.repositories import DebtRepository
from debt_ledger.infrastructure.database.session import get_db

router = APIRouter()


def decorate_debt(debt: Debt, today: date) -> DebtResponse:
    """Attach the read-time fields; urgency is recomputed on every read"""
    return DebtResponse(
        id=debt.id,
        bank_name=debt.bank_name,
        description=debt.description,
        amount=debt.amount,
        paid_amount=debt.paid_amount,
        remaining_amount=debt.amount - debt.paid_amount,
        due_date=debt.due_date,
        frequency=debt.frequency,
        status=debt.status,
        created_date=debt.created_date,
        urgency=classify_urgency(debt.due_date, debt.status, today),
    )


@router.get("", response_model=DebtListResponse)
def list_debts(
    status_filter: Optional[str] = Query(None, alias="status", description="pending | paid | overdue"),
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=1900, le=9999),
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """
    List the caller's debts ordered by due date.

    Without month/year the default view is the current month plus every
    overdue debt.
    """
    if status_filter and status_filter not in DEBT_STATUSES:
        raise ValidationFailure(f"Unknown status: {status_filter}")

    today = date.today()
    debts = DebtRepository(db).list_for_owner(
        identity.id,
        today=today,
        status=status_filter,
        month=month,
        year=year,
    )
    return DebtListResponse(debts=[decorate_debt(d, today) for d in debts])


@router.get("/{debt_id}", response_model=DebtResponse)
def get_debt(
    debt_id: int,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    debt = DebtRepository(db).get_owned(debt_id, identity.id)
    if debt is None:
        raise DebtNotFoundError()
    return decorate_debt(debt, date.today())


@router.post("", response_model=DebtResponse, status_code=status.HTTP_201_CREATED)
def create_debt(
    request_body: DebtCreateRequest,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """Record a new debt; it starts pending with nothing paid"""
    debt = DebtRepository(db).create_debt(
        owner_id=identity.id,
        bank_name=request_body.bank_name,
        description=request_body.description,
        amount=request_body.amount,
        due_date=request_body.due_date,
        frequency=request_body.frequency or settings.default_frequency,
    )
    db.commit()
    db.refresh(debt)

    logging.info("Debt created", extra={"user_id": identity.id, "debt_id": debt.id})
    return decorate_debt(debt, date.today())


@router.put("/{debt_id}", response_model=DebtResponse)
def update_debt(
    debt_id: int,
    request_body: DebtUpdateRequest,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """
    Edit descriptive fields of a debt.

    paid_amount and status are not editable here; they only change through
    POST /payments.
    """
    debt = DebtRepository(db).update_debt(debt_id, identity.id, request_body.model_dump(exclude_none=True))
    if debt is None:
        raise DebtNotFoundError()

    db.commit()
    db.refresh(debt)
    return decorate_debt(debt, date.today())


@router.delete("/{debt_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_debt(
    debt_id: int,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """Delete a debt and its payment history"""
    if not DebtRepository(db).delete_owned(debt_id, identity.id):
        raise DebtNotFoundError()

    db.commit()
    logging.info("Debt deleted", extra={"user_id": identity.id, "debt_id": debt_id})
    return Response(status_code=status.HTTP_204_NO_CONTENT)
