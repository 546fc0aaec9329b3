"""Reference data loaded into a fresh database"""

import logging
from typing import List, Tuple

from sqlalchemy.orm import Session

from debt_ledger.infrastructure.database.repositories import BankRepository

logger = logging.getLogger(__name__)

# (name, code, logo_url)
DEFAULT_BANKS: List[Tuple[str, str, str | None]] = [
    ("BBVA", "BBVA", None),
    ("Banco de Crédito del Perú", "BCP", None),
    ("Banco Pichincha", "PICHINCHA", None),
    ("BanBif", "BANBIF", None),
    ("Interbank", "IBK", None),
    ("Scotiabank", "SCOTIA", None),
]


def seed_banks(db: Session) -> int:
    """Upsert the default bank catalogue. Caller commits."""
    repo = BankRepository(db)
    for name, code, logo_url in DEFAULT_BANKS:
        repo.upsert_bank(name=name, code=code, logo_url=logo_url)

    logger.info("Bank catalogue seeded", extra={"bank_count": len(DEFAULT_BANKS)})
    return len(DEFAULT_BANKS)
