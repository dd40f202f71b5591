"""Celery tasks for scheduled database cleanup.

Tasks:
- retention_cleanup_task: Daily job (02:00 UTC by default, see celery_app)
"""

import logging
from typing import Any, Dict, Optional

from celery import shared_task

from config import get_settings
from database import create_db_engine, create_session_factory, session_scope
from observability.logging_config import configure_logging
from observability.request_id import request_id_context
from .service import RetentionService

logger = logging.getLogger(__name__)


@shared_task(name="retention.cleanup", bind=True)
def retention_cleanup_task(
    self,
    dry_run: bool = False,
    options: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Run every cleanup task once.

    The task is idempotent: running it twice in succession finds nothing
    more to delete on the second run.

    Args:
        dry_run: Count eligible rows without deleting anything
        options: Threshold overrides (CleanupOptions field names)

    Returns:
        Dict with the serialized CleanupResult plus a status key
        ('completed', 'completed_with_errors' or 'failed')
    """
    settings = get_settings()
    configure_logging(level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)

    overrides = dict(options or {})
    if dry_run:
        overrides["dry_run"] = True

    with request_id_context(self.request.id):
        logger.info("Retention cleanup task started", extra={"dry_run": dry_run})

        engine = create_db_engine(settings.DATABASE_URL)
        try:
            with session_scope(create_session_factory(engine)) as db:
                service = RetentionService(
                    db,
                    anomaly_threshold=settings.RETENTION_ANOMALY_THRESHOLD,
                )
                result = service.run_cleanup(overrides)

            payload = result.model_dump(mode="json")
            payload["status"] = "completed_with_errors" if result.has_errors else "completed"

            logger.info(
                "Retention cleanup task finished",
                extra={
                    "dry_run": result.dry_run,
                    "total_deleted": result.total_deleted,
                    "duration_ms": result.duration_ms,
                    "errors": result.errors,
                },
            )
            return payload

        except Exception as e:
            logger.error(
                "Retention cleanup task failed",
                exc_info=True,
                extra={"error": str(e)},
            )

            # Report failure without raising; the next scheduled run retries
            return {
                "status": "failed",
                "error": str(e),
                "total_deleted": 0,
            }

        finally:
            engine.dispose()
