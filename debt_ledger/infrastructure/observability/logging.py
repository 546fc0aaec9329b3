"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger

from debt_ledger.config import settings

UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: Optional[str] = None) -> None:
    """
    Send every log record to stdout as one JSON object.

    The level defaults to settings.log_level. uvicorn's own loggers are
    routed through the same handler so access and error lines share the format.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s"))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel((level or settings.log_level).upper())

    for name in UVICORN_LOGGERS:
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.propagate = True


def log_payment(
    request_id: str,
    user_id: int,
    debt_id: int,
    amount: Decimal,
    status: str,
    duration_ms: float,
) -> None:
    """Log structured payment outcome for analysis"""
    logging.getLogger("debt_ledger.payments").info(
        "Payment applied",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "debt_id": debt_id,
            "step": "payment_applied",
            "amount": str(amount),
            "debt_status": status,
            "duration_ms": duration_ms,
        },
    )
