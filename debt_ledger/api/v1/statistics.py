"""GET /statistics - per-user debt totals"""

from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from debt_ledger.api.dependencies import get_current_identity
from debt_ledger.api.v1.schemas import StatisticsResponse, StatisticsSchema
from debt_ledger.domain.models import Identity
from debt_ledger.infrastructure.database.repositories import DebtRepository
from debt_ledger.infrastructure.database.session import get_db

router = APIRouter()


@router.get("", response_model=StatisticsResponse)
def get_statistics(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """
    Counts and sums by status.

    pending/overdue amounts are what is still owed (principal minus paid);
    paid_amount is the total paid across all debts.
    """
    stats = DebtRepository(db).get_statistics(identity.id, today=date.today())
    return StatisticsResponse(statistics=StatisticsSchema.model_validate(stats))
