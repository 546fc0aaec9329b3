"""Unit tests for structured logging setup"""

import json
import logging
import pytest
from debt_ledger.config import settings
from debt_ledger.infrastructure.observability.logging import CustomJsonFormatter, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_level_defaults_to_settings(monkeypatch):
    monkeypatch.setattr(settings, "log_level", "warning")

    setup_logging()

    assert logging.getLogger().level == logging.WARNING


def test_explicit_level_wins(monkeypatch):
    monkeypatch.setattr(settings, "log_level", "warning")

    setup_logging("DEBUG")

    assert logging.getLogger().level == logging.DEBUG


def test_records_are_json_with_service_metadata():
    setup_logging("INFO")
    handlers = logging.getLogger().handlers

    assert len(handlers) == 1
    assert isinstance(handlers[0].formatter, CustomJsonFormatter)

    record = logging.LogRecord("debt_ledger.payments", logging.INFO, __file__, 1, "Payment applied", None, None)
    record.debt_id = 7
    payload = json.loads(handlers[0].format(record))

    assert payload["message"] == "Payment applied"
    assert payload["level"] == "INFO"
    assert payload["service"] == settings.service_name
    assert payload["debt_id"] == 7
    assert "timestamp" in payload


def test_uvicorn_loggers_share_root_handler():
    uvicorn_access = logging.getLogger("uvicorn.access")
    uvicorn_access.addHandler(logging.NullHandler())
    uvicorn_access.propagate = False

    setup_logging("INFO")

    assert uvicorn_access.handlers == []
    assert uvicorn_access.propagate is True
