"""Retention service for periodic database cleanup.

This service implements the core retention logic:
- Run the fixed sequence of cleanup tasks with per-task fault isolation
- Dry-run mode (count eligible rows, delete nothing)
- Database statistics with cleanup estimates under default thresholds

All tasks are idempotent and can be safely retried; a failed task is simply
picked up again by the next scheduled run.
"""

import logging
import time
from datetime import datetime
from typing import Any, Callable, Dict, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session

from models import (
    utcnow,
    Notification,
    AdminNotification,
    Alert,
    ContactRequest,
    JobApplication,
    QuestionFeedback,
    QuestionVersion,
    Conversation,
    ConversationParticipant,
    Message,
    SimulationSession,
    SimulationSessionParticipant,
    SessionCheatingEvent,
    SessionMessage,
    CalendarEvent,
    EventInvitation,
    StaffAbsence,
)
from observability.metrics import (
    retention_rows_deleted_total,
    retention_task_failures_total,
    retention_run_duration_seconds,
    retention_last_run_timestamp,
)
from .cleanup_tasks import CLEANUP_TASKS, CleanupTask, validate_tasks
from .schemas import (
    CleanupOptions,
    CleanupResult,
    DatabaseStats,
    TaskResult,
    resolve_options,
)

logger = logging.getLogger(__name__)

# Deleted-row volume above which a run is reported as anomalous
DEFAULT_ANOMALY_THRESHOLD = 10000

# Tables reported by get_statistics(), in display order
TRACKED_TABLES = {
    "notifications": Notification,
    "admin_notifications": AdminNotification,
    "alerts": Alert,
    "contact_requests": ContactRequest,
    "job_applications": JobApplication,
    "question_feedback": QuestionFeedback,
    "question_versions": QuestionVersion,
    "conversations": Conversation,
    "conversation_participants": ConversationParticipant,
    "messages": Message,
    "session_cheating_events": SessionCheatingEvent,
    "session_messages": SessionMessage,
    "simulation_sessions": SimulationSession,
    "simulation_session_participants": SimulationSessionParticipant,
    "calendar_events": CalendarEvent,
    "event_invitations": EventInvitation,
    "staff_absences": StaffAbsence,
}


class RetentionService:
    """Service for executing retention cleanup operations.

    The store session is injected by the caller, which also owns its
    lifecycle (FastAPI request, CLI run or Celery task). The service
    commits and rolls back that session task by task, so it must be handed
    over with nothing pending.
    """

    def __init__(
        self,
        db: Session,
        tasks: Optional[Sequence[CleanupTask]] = None,
        clock: Callable[[], datetime] = utcnow,
        anomaly_threshold: int = DEFAULT_ANOMALY_THRESHOLD,
    ):
        """Initialize retention service.

        Args:
            db: Database session
            tasks: Cleanup task table (defaults to CLEANUP_TASKS)
            clock: Returns the current time; read once per call
            anomaly_threshold: Total deletions above which a warning is logged
        """
        self.db = db
        self.tasks = CLEANUP_TASKS if tasks is None else validate_tasks(tasks)
        self.clock = clock
        self.anomaly_threshold = anomaly_threshold

    def run_cleanup(self, options: Optional[Any] = None) -> CleanupResult:
        """Run every cleanup task in order.

        Each task runs in its own transaction: committed on success, rolled
        back on failure. A failing task is recorded and the remaining tasks
        still run.

        Args:
            options: Partial overrides merged onto the default thresholds
                (CleanupOptions, CleanupOptionsUpdate, dict or None)

        Returns:
            CleanupResult: Per-task counts, total and error messages

        Raises:
            pydantic.ValidationError: If an override is out of bounds or
                unknown (raised before any task runs)
            RuntimeError: If the session holds uncommitted changes
        """
        opts = resolve_options(options)
        self._ensure_clean_session()
        now = self.clock()
        started = time.monotonic()
        mode = "dry_run" if opts.dry_run else "delete"

        logger.info(
            f"Starting database cleanup at {now.isoformat()}",
            extra={"dry_run": opts.dry_run},
        )
        if opts.dry_run:
            logger.info("Dry run: no data will be deleted", extra={"dry_run": True})

        results: Dict[str, TaskResult] = {}
        errors = []
        total_deleted = 0

        for task in self.tasks:
            try:
                deleted = self._run_task(task, opts, now)
            except Exception as e:
                self.db.rollback()
                message = f"{task.label} cleanup failed: {e}"
                errors.append(message)
                results[task.name] = TaskResult(deleted=0, error=message)
                retention_task_failures_total.labels(task=task.name).inc()
                logger.error(
                    message,
                    exc_info=True,
                    extra={"task": task.name, "dry_run": opts.dry_run},
                )
                continue

            results[task.name] = TaskResult(deleted=deleted)
            total_deleted += deleted
            retention_rows_deleted_total.labels(task=task.name, mode=mode).inc(deleted)

        duration_s = time.monotonic() - started
        result = CleanupResult(
            success=len(errors) == 0,
            timestamp=utcnow(),
            duration_ms=int(duration_s * 1000),
            dry_run=opts.dry_run,
            results=results,
            total_deleted=total_deleted,
            errors=errors,
        )

        retention_run_duration_seconds.observe(duration_s)
        retention_last_run_timestamp.set(result.timestamp.timestamp())

        logger.info(
            f"Cleanup completed in {result.duration_ms}ms. Total deleted: {total_deleted}",
            extra={
                "dry_run": opts.dry_run,
                "duration_ms": result.duration_ms,
                "total_deleted": total_deleted,
            },
        )

        if result.is_anomaly(self.anomaly_threshold):
            logger.warning(
                f"Cleanup anomaly detected: {total_deleted} records affected",
                extra={"total_deleted": total_deleted, "dry_run": opts.dry_run},
            )

        if result.has_errors:
            logger.error(
                f"Cleanup completed with {len(errors)} failed task(s)",
                extra={"errors": errors},
            )

        return result

    def _ensure_clean_session(self) -> None:
        """Refuse a session with pending changes; task rollbacks would discard them."""
        if self.db.new or self.db.dirty or self.db.deleted:
            raise RuntimeError(
                "RetentionService requires a session without uncommitted changes"
            )

    def _run_task(self, task: CleanupTask, opts: CleanupOptions, now: datetime) -> int:
        """Run one task as its own unit of work."""
        if opts.dry_run:
            count = task.count(self.db, opts, now)
            # Nothing was written, end the read transaction
            self.db.rollback()
            logger.info(
                f"Would delete {count} {task.label.lower()}",
                extra={"task": task.name, "deleted": count, "dry_run": True},
            )
            return count

        deleted = task.purge(self.db, opts, now)
        self.db.commit()
        logger.info(
            f"Deleted {deleted} {task.label.lower()}",
            extra={"task": task.name, "deleted": deleted, "dry_run": False},
        )
        return deleted

    def get_statistics(self) -> DatabaseStats:
        """Row counts per tracked table and cleanup estimates.

        Estimates always use the default thresholds, independent of any
        options a later run might use. Store errors propagate to the caller.

        Returns:
            DatabaseStats: Table counts and estimated cleanable rows
        """
        now = self.clock()
        defaults = CleanupOptions()

        table_counts = {
            name: int(self.db.query(func.count()).select_from(model).scalar() or 0)
            for name, model in TRACKED_TABLES.items()
        }
        estimated_cleanable = {
            task.name: task.count(self.db, defaults, now)
            for task in self.tasks
        }

        stats = DatabaseStats(
            timestamp=now,
            table_counts=table_counts,
            estimated_cleanable=estimated_cleanable,
        )

        logger.info(
            f"Collected database statistics: {stats.total_rows} rows, "
            f"{stats.total_cleanable} cleanable"
        )

        return stats
