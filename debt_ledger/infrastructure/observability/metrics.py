"""Prometheus metrics for monitoring payments, settlements and authentication"""

from decimal import Decimal
from prometheus_client import Counter, Histogram

# Payment metrics
payment_counter = Counter(
    "debt_ledger_payments_total",
    "Payment requests handled by the ledger",
    ["outcome"],  # applied | not_found | invalid | failed
)

debt_settled_counter = Counter(
    "debt_ledger_debts_settled_total",
    "Payments that moved a debt to paid",
)

payment_amount_histogram = Histogram(
    "debt_ledger_payment_amount",
    "Amount of applied payments",
    buckets=[10, 50, 100, 250, 500, 1000, 2500, 5000, 10000],
)

# Auth metrics
auth_failure_counter = Counter(
    "debt_ledger_auth_failures_total",
    "Rejected authentication attempts",
    ["reason"],  # missing_token | invalid_token | expired_token | bad_credentials
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_payment(outcome: str, amount: Decimal | None = None, settled: bool = False) -> None:
    """Record payment outcome; amount and settlement only count for applied payments"""
    payment_counter.labels(outcome=outcome).inc()

    if outcome != "applied":
        return

    if amount is not None:
        payment_amount_histogram.observe(float(amount))
    if settled:
        debt_settled_counter.inc()


def record_auth_failure(reason: str) -> None:
    auth_failure_counter.labels(reason=reason).inc()
