"""Request ID and access logging middleware."""

import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .request_id import request_id_context
from .logging_config import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Probe endpoints are not access-logged
QUIET_PATHS = frozenset({"/health", "/ready", "/metrics"})


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Bind a request ID (client-supplied or generated) and log each request.

    The ID is echoed back in the X-Request-ID response header so a scheduler
    can correlate its call with the cleanup log lines.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        with request_id_context(request.headers.get(REQUEST_ID_HEADER)) as request_id:
            started = time.perf_counter()
            fields = {"method": request.method, "path": request.url.path}

            try:
                response = await call_next(request)
            except Exception as e:
                fields["duration_ms"] = _elapsed_ms(started)
                logger.error(f"Unhandled error: {e}", extra=fields, exc_info=True)
                raise

            if request.url.path not in QUIET_PATHS:
                fields.update(
                    status_code=response.status_code,
                    duration_ms=_elapsed_ms(started),
                    client_ip=request.client.host if request.client else None,
                )
                logger.info(
                    f"{request.method} {request.url.path} {response.status_code}",
                    extra=fields,
                )

            response.headers[REQUEST_ID_HEADER] = request_id
            return response


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
