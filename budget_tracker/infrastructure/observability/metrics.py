"""Prometheus metrics for payment activity and record store health"""

from decimal import Decimal
from typing import Optional
from prometheus_client import Counter, Histogram

# Payment metrics
payment_counter = Counter(
    "budget_payments_total",
    "Payments recorded against bills",
    ["mode"],  # immediate | atomic | scheduled
)

overpayment_counter = Counter(
    "budget_overpayments_total",
    "Immediate payments that drove a bill balance below zero",
)

# Record store metrics
record_store_failures_counter = Counter(
    "record_store_failures_total",
    "Failed record store calls",
    ["table", "operation"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_payment(mode: str, remaining_balance: Optional[Decimal] = None) -> None:
    """Count a recorded payment and flag balances pushed negative"""
    payment_counter.labels(mode=mode).inc()
    if remaining_balance is not None and not remaining_balance.is_nan() and remaining_balance < 0:
        overpayment_counter.inc()


def record_store_failure(table: str, operation: str) -> None:
    record_store_failures_counter.labels(table=table or "unknown", operation=operation or "unknown").inc()
