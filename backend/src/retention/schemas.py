"""Pydantic schemas for cleanup options, results and statistics.

This module defines retention-related schemas:
- CleanupOptions: Thresholds for every cleanup task plus the dry-run flag
- CleanupOptionsUpdate: Partial override (request body of the cron endpoint)
- TaskResult / CleanupResult: Outcome of one cleanup run
- DatabaseStats: Row counts and cleanup estimates
"""

from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Bounds applied to every age threshold (days)
MIN_RETENTION_DAYS = 1
MAX_RETENTION_DAYS = 3650

# Option keys: snake_case field names or their camelCase aliases.
# Unknown keys raise a ValidationError.
OPTIONS_CONFIG = ConfigDict(
    extra="forbid",
    alias_generator=to_camel,
    populate_by_name=True,
)


def _days(default: int, description: str):
    return Field(
        default=default,
        ge=MIN_RETENTION_DAYS,
        le=MAX_RETENTION_DAYS,
        description=description,
    )


def _optional_days(description: str):
    return Field(
        None,
        ge=MIN_RETENTION_DAYS,
        le=MAX_RETENTION_DAYS,
        description=description,
    )


class CleanupOptions(BaseModel):
    """Retention thresholds for every cleanup task.

    All thresholds are ages in days (1-3650) except question_versions_to_keep,
    which is a row count per question (at least 1, so the newest version of a
    question is never removed).

    Default retention periods:
    - Notifications: read 30, unread 90, archived 7
    - Admin notifications: 60
    - Alerts: expired 7, read 30
    - Contact requests (replied/archived): 180
    - Job applications (rejected): 365
    - Question feedback (fixed/rejected): 90
    - Question versions kept per question: 10
    - Conversations: fully archived 90, any 365
    - Session cheating events: 90
    - Session messages: 30
    - Completed/cancelled simulation sessions: 180
    - Past calendar events: 365
    - Closed staff absences: 365
    """

    model_config = OPTIONS_CONFIG

    notifications_read_days: int = _days(30, "Delete read notifications older than N days")
    notifications_unread_days: int = _days(90, "Delete unread notifications older than N days")
    notifications_archived_days: int = _days(7, "Delete archived notifications older than N days")

    admin_notifications_days: int = _days(60, "Delete legacy admin notifications older than N days")

    alerts_expired_days: int = _days(7, "Delete alerts expired for more than N days")
    alerts_read_days: int = _days(30, "Delete read alerts older than N days")

    contact_requests_processed_days: int = _days(180, "Delete replied/archived contact requests older than N days")
    job_applications_rejected_days: int = _days(365, "Delete rejected job applications older than N days")

    feedback_resolved_days: int = _days(90, "Delete fixed/rejected question feedback older than N days")

    question_versions_to_keep: int = Field(
        default=10,
        ge=1,
        description="Keep the newest N versions of every question",
    )

    messages_archived_days: int = _days(90, "Delete conversations archived by everyone and idle for N days")
    messages_old_days: int = _days(365, "Delete any conversation idle for N days")

    session_events_days: int = _days(90, "Delete session cheating events older than N days")
    session_messages_days: int = _days(30, "Delete session chat messages older than N days")
    completed_sessions_days: int = _days(180, "Delete completed/cancelled sessions idle for N days")

    old_calendar_events_days: int = _days(365, "Delete one-off calendar events ended N days ago")
    old_staff_absences_days: int = _days(365, "Delete closed staff absences ended N days ago")

    dry_run: bool = Field(
        default=False,
        description="Count eligible rows without deleting anything",
    )


class CleanupOptionsUpdate(BaseModel):
    """Partial override of CleanupOptions (all fields optional).

    Used as the request body of POST /cron/cleanup.
    """

    model_config = OPTIONS_CONFIG

    notifications_read_days: Optional[int] = _optional_days("Read notifications age")
    notifications_unread_days: Optional[int] = _optional_days("Unread notifications age")
    notifications_archived_days: Optional[int] = _optional_days("Archived notifications age")
    admin_notifications_days: Optional[int] = _optional_days("Admin notifications age")
    alerts_expired_days: Optional[int] = _optional_days("Days since alert expiry")
    alerts_read_days: Optional[int] = _optional_days("Read alerts age")
    contact_requests_processed_days: Optional[int] = _optional_days("Processed contact requests age")
    job_applications_rejected_days: Optional[int] = _optional_days("Rejected job applications age")
    feedback_resolved_days: Optional[int] = _optional_days("Resolved feedback age")
    question_versions_to_keep: Optional[int] = Field(None, ge=1, description="Versions kept per question")
    messages_archived_days: Optional[int] = _optional_days("Archived conversations idle time")
    messages_old_days: Optional[int] = _optional_days("Any conversation idle time")
    session_events_days: Optional[int] = _optional_days("Cheating events age")
    session_messages_days: Optional[int] = _optional_days("Session messages age")
    completed_sessions_days: Optional[int] = _optional_days("Closed sessions idle time")
    old_calendar_events_days: Optional[int] = _optional_days("Days since event end")
    old_staff_absences_days: Optional[int] = _optional_days("Days since absence end")
    dry_run: Optional[bool] = Field(None, description="Count without deleting")


def resolve_options(overrides: Optional[Any] = None) -> CleanupOptions:
    """Merge overrides onto the default options.

    Args:
        overrides: None, a CleanupOptions, a CleanupOptionsUpdate or a mapping
            of field name (or camelCase alias) to value. None values are ignored.

    Returns:
        CleanupOptions: Fully populated options

    Raises:
        pydantic.ValidationError: If an override is out of bounds or
            names an unknown option
    """
    if overrides is None:
        return CleanupOptions()
    if isinstance(overrides, CleanupOptions):
        return overrides
    if isinstance(overrides, CleanupOptionsUpdate):
        data: Mapping[str, Any] = overrides.model_dump(exclude_unset=True)
    else:
        data = overrides

    return CleanupOptions(**{key: value for key, value in data.items() if value is not None})


class TaskResult(BaseModel):
    """Outcome of a single cleanup task."""

    deleted: int = Field(default=0, ge=0, description="Rows deleted (or eligible, in dry run)")
    error: Optional[str] = Field(default=None, description="Failure message, if the task failed")


class CleanupResult(BaseModel):
    """Summary of one cleanup run.

    `results` preserves the execution order of the tasks.
    """

    success: bool = Field(description="True when no task failed")
    timestamp: datetime = Field(description="When the run finished")
    duration_ms: int = Field(ge=0, description="Wall-clock duration in milliseconds")
    dry_run: bool = Field(default=False, description="Whether the run was a dry run")
    results: Dict[str, TaskResult] = Field(default_factory=dict)
    total_deleted: int = Field(default=0, ge=0)
    errors: List[str] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Whether any task failed."""
        return len(self.errors) > 0

    def is_anomaly(self, threshold: int = 10000) -> bool:
        """Whether deletion volume exceeds the alert threshold."""
        return self.total_deleted > threshold


class CleanupResponse(CleanupResult):
    """CleanupResult plus a human-readable message (HTTP response)."""

    message: str


class DatabaseStats(BaseModel):
    """Row counts and cleanup estimates under the default thresholds."""

    timestamp: datetime = Field(description="When the statistics were collected")
    table_counts: Dict[str, int] = Field(default_factory=dict)
    estimated_cleanable: Dict[str, int] = Field(default_factory=dict)

    @property
    def total_rows(self) -> int:
        """Total rows across tracked tables."""
        return sum(self.table_counts.values())

    @property
    def total_cleanable(self) -> int:
        """Total rows eligible for cleanup."""
        return sum(self.estimated_cleanable.values())
