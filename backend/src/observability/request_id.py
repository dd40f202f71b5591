"""Request ID management for log correlation.

HTTP requests get their ID from the middleware; background jobs (CLI runs,
Celery tasks) bind a job ID with request_id_context() so every log line of
one cleanup run can be correlated.
"""

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

# Context variable for request_id (async-safe)
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def generate_request_id() -> str:
    """Generate a new unique request ID (UUID4)."""
    return str(uuid.uuid4())


def get_request_id() -> str:
    """Current request ID, or "no-request-id" if not set."""
    return request_id_var.get() or "no-request-id"


def set_request_id(request_id: str) -> None:
    """Set request ID in current context."""
    request_id_var.set(request_id)


@contextmanager
def request_id_context(request_id: Optional[str] = None) -> Iterator[str]:
    """Bind a request/job ID for the duration of a block.

    Args:
        request_id: ID to bind; a new one is generated when omitted

    Yields:
        str: The bound ID
    """
    value = request_id or generate_request_id()
    token = request_id_var.set(value)
    try:
        yield value
    finally:
        request_id_var.reset(token)
