"""Prometheus metrics for the retention job.

Defines and exposes operational metrics for monitoring and alerting.
"""

from prometheus_client import Counter, Histogram, Gauge

# Rows removed (mode=delete) or found eligible (mode=dry_run) per task
retention_rows_deleted_total = Counter(
    "school_retention_rows_deleted_total",
    "Rows deleted by the retention job",
    ["task", "mode"]  # mode: delete|dry_run
)

retention_task_failures_total = Counter(
    "school_retention_task_failures_total",
    "Cleanup tasks that raised an error",
    ["task"]
)

retention_run_duration_seconds = Histogram(
    "school_retention_run_duration_seconds",
    "Duration of a complete cleanup run in seconds",
    buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 300.0]
)

retention_last_run_timestamp = Gauge(
    "school_retention_last_run_timestamp",
    "Unix timestamp of the last finished cleanup run"
)
