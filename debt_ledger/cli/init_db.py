"""CLI entry point for creating the schema and loading reference data.

Usage:
    python -m debt_ledger.cli.init_db
    debt-ledger-init-db

Exit Codes:
    0 - Success: tables created (if missing) and banks seeded
    1 - Failure: error encountered; seed transaction rolled back
"""

import logging
import sys

from sqlalchemy.exc import SQLAlchemyError

from debt_ledger.config import settings
from debt_ledger.infrastructure.database.seed import seed_banks
from debt_ledger.infrastructure.database.session import Database
from debt_ledger.infrastructure.observability.logging import setup_logging

logger = logging.getLogger(__name__)


def main(database: Database | None = None) -> int:
    """
    Create missing tables, then upsert the default bank catalogue.

    Returns:
        Exit code: 0 for success, 1 for failure
    """
    setup_logging()
    database = database or Database(settings.database_url)

    try:
        database.create_all()
        with database.session() as db:
            try:
                seeded = seed_banks(db)
                db.commit()
            except SQLAlchemyError:
                db.rollback()
                raise

        logger.info("Database initialised", extra={"bank_count": seeded})
        return 0

    except SQLAlchemyError as e:
        logger.error(f"Database initialisation failed: {e}")
        return 1

    finally:
        database.dispose()


if __name__ == "__main__":
    sys.exit(main())
