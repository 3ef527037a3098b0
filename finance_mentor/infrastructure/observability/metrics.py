"""Prometheus metrics for imports, analysis fallbacks and request latency"""

from prometheus_client import Counter, Histogram

# Import metrics
transactions_imported_counter = Counter(
    "finance_mentor_transactions_imported_total",
    "Transactions accepted from CSV imports",
)

rows_skipped_counter = Counter(
    "finance_mentor_import_rows_skipped_total",
    "CSV rows rejected during import",
)

import_failure_counter = Counter(
    "finance_mentor_import_failures_total",
    "CSV imports that produced no transactions",
    ["reason"],  # malformed_input | missing_required_columns | no_valid_rows
)

# Analysis metrics
analysis_fallback_counter = Counter(
    "finance_mentor_analysis_fallback_total",
    "Remote analyses answered by the local engine",
    ["kind", "reason"],  # kind: chat | health_score
)

health_score_histogram = Histogram(
    "finance_mentor_health_score",
    "Health scores served",
    buckets=[20, 40, 60, 80, 100],
)

remote_latency_histogram = Histogram(
    "finance_mentor_remote_analysis_latency_seconds",
    "Remote model response time",
    buckets=[0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

# Persistence
state_reinitialized_counter = Counter(
    "finance_mentor_state_reinitialized_total",
    "Persisted collections discarded as corrupt",
    ["key"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_import(accepted: int, skipped: int, failure_reason: str | None = None) -> None:
    """Record one CSV import outcome"""
    transactions_imported_counter.inc(accepted)
    rows_skipped_counter.inc(skipped)
    if failure_reason:
        import_failure_counter.labels(reason=failure_reason).inc()
