"""Logging setup shared by the API, the CLI and the Celery worker.

Log lines are JSON objects by default (one per line on stdout) so the
cleanup job's per-task counts can be queried from the log pipeline. Every
line carries the request or job ID bound in observability.request_id.
"""

import logging
import json
import sys
from datetime import datetime, timezone

from .request_id import get_request_id

# extra={...} keys copied into the JSON payload when present on a record
EXTRA_FIELDS = (
    "task",
    "dry_run",
    "deleted",
    "children",
    "total_deleted",
    "duration_ms",
    "errors",
    "error",
    "method",
    "path",
    "status_code",
    "client_ip",
)

PLAIN_FORMAT = "%(asctime)s - %(levelname)s - %(request_id)s - %(name)s - %(message)s"

# Third-party loggers that are too chatty at INFO
QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "celery.app.trace")


class RequestIDFilter(logging.Filter):
    """Stamp the current request/job ID on every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id()
        return True


class JSONFormatter(logging.Formatter):
    """Render a record as a single JSON object.

    Only whitelisted `extra` keys (EXTRA_FIELDS) are copied, so arbitrary
    attributes never leak into the log stream.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "request_id": getattr(record, "request_id", "no-request-id"),
            "message": record.getMessage(),
        }

        for key in EXTRA_FIELDS:
            if hasattr(record, key):
                payload[key] = getattr(record, key)

        if record.exc_info:
            payload["error"] = str(record.exc_info[1])
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


def configure_logging(level: str = "INFO", json_format: bool = True) -> None:
    """Replace the root handlers with one stdout handler.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR)
        json_format: JSON lines if True, otherwise a plain text format
    """
    numeric_level = getattr(logging, level.upper())

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(JSONFormatter() if json_format else logging.Formatter(PLAIN_FORMAT))
    handler.addFilter(RequestIDFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
