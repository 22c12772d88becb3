"""Prometheus metrics for debt operations, ledger activity and collaborator health"""

from prometheus_client import Counter, Histogram

# Debt operation metrics
operation_counter = Counter(
    "crediario_operation_total",
    "Debt operations submitted",
    ["outcome"],  # completed | partial | rejected | failed
)

operation_warning_counter = Counter(
    "crediario_operation_warnings_total",
    "Post-commit side effects that failed and need manual reconciliation",
    ["kind"],  # stock | cash_flow
)

# Ledger metrics
ledger_transaction_counter = Counter(
    "crediario_ledger_transaction_total",
    "Credit transactions applied to accounts",
    ["type"],  # debt | payment
)

# Collaborator metrics
remote_call_failures_counter = Counter(
    "crediario_remote_call_failures_total",
    "Failed calls to catalog or cash flow services",
    ["service"],
)

cash_flow_latency_histogram = Histogram(
    "cash_flow_post_latency_seconds",
    "Cash flow posting response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_operation(outcome: str, stock_failures: int = 0, cash_flow_failed: bool = False) -> None:
    """Record the outcome of one debt operation and any partial failures"""
    operation_counter.labels(outcome=outcome).inc()

    if stock_failures:
        operation_warning_counter.labels(kind="stock").inc(stock_failures)
    if cash_flow_failed:
        operation_warning_counter.labels(kind="cash_flow").inc()
