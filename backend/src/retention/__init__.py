"""Data retention and cleanup module.

Periodically deletes or trims old rows across the school platform tables.

This module provides:
- Per-entity retention policies (age thresholds, terminal statuses)
- "Keep newest N" pruning of question versions
- Cascading deletes for conversations, sessions and calendar events
- Dry-run mode and database statistics
- Cron endpoint, CLI and Celery task entry points
"""

from .schemas import (
    CleanupOptions,
    CleanupOptionsUpdate,
    CleanupResult,
    DatabaseStats,
    TaskResult,
    resolve_options,
)

# Service and entry points are imported lazily to keep model imports out of schema users
# Use: from retention.service import RetentionService
# Use: from retention.tasks import retention_cleanup_task

__all__ = [
    "CleanupOptions",
    "CleanupOptionsUpdate",
    "CleanupResult",
    "DatabaseStats",
    "TaskResult",
    "resolve_options",
]
