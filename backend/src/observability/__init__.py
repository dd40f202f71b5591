"""Observability module.

Provides structured logging, metrics, request correlation and health checks.
"""

from .logging_config import configure_logging, get_logger
from .metrics import (
    retention_rows_deleted_total,
    retention_task_failures_total,
    retention_run_duration_seconds,
    retention_last_run_timestamp,
)
from .request_id import (
    request_id_var,
    get_request_id,
    set_request_id,
    generate_request_id,
    request_id_context,
)
from .health import HealthStatus, ComponentHealth
from .middleware import RequestIDMiddleware

__all__ = [
    # Logging
    "configure_logging",
    "get_logger",
    # Metrics
    "retention_rows_deleted_total",
    "retention_task_failures_total",
    "retention_run_duration_seconds",
    "retention_last_run_timestamp",
    # Request ID
    "request_id_var",
    "get_request_id",
    "set_request_id",
    "generate_request_id",
    "request_id_context",
    # Health
    "HealthStatus",
    "ComponentHealth",
    # Middleware
    "RequestIDMiddleware",
]
