"""GET /banks - active bank catalogue (no auth)"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from debt_ledger.api.v1.schemas import BankListResponse, BankSchema
from debt_ledger.infrastructure.database.repositories import BankRepository
from debt_ledger.infrastructure.database.session import get_db

router = APIRouter()


@router.get("", response_model=BankListResponse)
def list_banks(db: Session = Depends(get_db)):
    banks = BankRepository(db).list_active()
    return BankListResponse(banks=[BankSchema.model_validate(b) for b in banks])
