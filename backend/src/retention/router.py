"""FastAPI router for the scheduled cleanup endpoint.

Provides:
- POST /cron/cleanup: run cleanup (optional JSON body with option overrides)
- GET /cron/cleanup: database statistics

Both endpoints are called by an external scheduler and require the shared
cron secret in the Authorization header.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends

from dependencies import verify_cron_secret, get_retention_service
from .schemas import CleanupOptionsUpdate, CleanupResponse, DatabaseStats
from .service import RetentionService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/cron",
    tags=["retention"],
    dependencies=[Depends(verify_cron_secret)],
)


@router.post("/cleanup", response_model=CleanupResponse)
def run_cleanup(
    options: Optional[CleanupOptionsUpdate] = Body(default=None),
    service: RetentionService = Depends(get_retention_service),
) -> CleanupResponse:
    """Run database cleanup.

    The body is optional; any field given overrides the default threshold
    for this run only, e.g. {"dry_run": true, "notifications_read_days": 14}.

    Task failures do not fail the request: they are reported in `errors`
    and `success` is false.

    Returns:
        CleanupResponse: Cleanup result and a summary message

    Raises:
        HTTPException 401: Invalid cron secret
        HTTPException 422: Threshold out of bounds
    """
    overrides = options.model_dump(exclude_unset=True) if options else {}
    logger.info(f"Cron cleanup requested with options: {overrides}")

    result = service.run_cleanup(overrides)

    if result.success:
        message = f"Cleanup completed. Deleted {result.total_deleted} records."
    else:
        message = "Cleanup completed with errors."

    return CleanupResponse(message=message, **result.model_dump())


@router.get("/cleanup", response_model=DatabaseStats)
def get_cleanup_statistics(
    service: RetentionService = Depends(get_retention_service),
) -> DatabaseStats:
    """Current row counts and cleanup estimates under default thresholds.

    Returns:
        DatabaseStats: Table counts and estimated cleanable rows
    """
    return service.get_statistics()
