"""Prometheus metrics for monitoring calculation volume and request latency"""

from prometheus_client import Counter, Histogram

# Calculation metrics
calculation_counter = Counter(
    "paycycle_calculations_total",
    "Total engine calculations served",
    ["operation"],  # cycle | next_due | agenda | amortization | schedule | payment_split | period | buckets | report | summary
)

domain_error_counter = Counter(
    "paycycle_domain_errors_total",
    "Requests rejected by domain validation",
    ["error"],
)

transactions_bucketed_histogram = Histogram(
    "paycycle_transactions_per_request",
    "Transactions submitted per bucketing or report request",
    buckets=[0, 10, 50, 100, 500, 1000, 5000],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_calculation(operation: str, transaction_count: int | None = None) -> None:
    """Record one served calculation, and the batch size for transaction-based ones"""
    calculation_counter.labels(operation=operation).inc()

    if transaction_count is not None:
        transactions_bucketed_histogram.observe(transaction_count)


def record_domain_error(error: Exception) -> None:
    domain_error_counter.labels(error=type(error).__name__).inc()
