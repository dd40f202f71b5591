"""Unit tests for retention schemas.

Tests option defaults and bounds, partial override merging and result helpers.
"""

import pytest
from datetime import datetime, timezone
from pydantic import ValidationError

from retention.schemas import (
    CleanupOptions,
    CleanupOptionsUpdate,
    CleanupResult,
    DatabaseStats,
    TaskResult,
    resolve_options,
)


class TestCleanupOptions:
    """Test CleanupOptions defaults and validation."""

    def test_default_values(self):
        opts = CleanupOptions()

        assert opts.notifications_read_days == 30
        assert opts.notifications_unread_days == 90
        assert opts.notifications_archived_days == 7
        assert opts.admin_notifications_days == 60
        assert opts.alerts_expired_days == 7
        assert opts.alerts_read_days == 30
        assert opts.contact_requests_processed_days == 180
        assert opts.job_applications_rejected_days == 365
        assert opts.feedback_resolved_days == 90
        assert opts.question_versions_to_keep == 10
        assert opts.messages_archived_days == 90
        assert opts.messages_old_days == 365
        assert opts.session_events_days == 90
        assert opts.session_messages_days == 30
        assert opts.completed_sessions_days == 180
        assert opts.old_calendar_events_days == 365
        assert opts.old_staff_absences_days == 365
        assert opts.dry_run is False

    def test_zero_days_rejected(self):
        with pytest.raises(ValidationError) as exc:
            CleanupOptions(notifications_read_days=0)

        assert "greater than or equal to 1" in str(exc.value)

    def test_negative_days_rejected(self):
        with pytest.raises(ValidationError):
            CleanupOptions(session_messages_days=-5)

    def test_maximum_days(self):
        with pytest.raises(ValidationError) as exc:
            CleanupOptions(old_calendar_events_days=3651)

        assert "less than or equal to 3650" in str(exc.value)

        assert CleanupOptions(old_calendar_events_days=3650).old_calendar_events_days == 3650

    def test_versions_to_keep_minimum(self):
        """Keeping zero versions would delete every question's history."""
        with pytest.raises(ValidationError):
            CleanupOptions(question_versions_to_keep=0)

        assert CleanupOptions(question_versions_to_keep=1).question_versions_to_keep == 1


class TestResolveOptions:
    """Test merging of partial overrides onto defaults."""

    def test_none_returns_defaults(self):
        assert resolve_options(None) == CleanupOptions()

    def test_dict_override_keeps_other_defaults(self):
        opts = resolve_options({"notifications_read_days": 14, "dry_run": True})

        assert opts.notifications_read_days == 14
        assert opts.dry_run is True
        assert opts.notifications_unread_days == 90
        assert opts.question_versions_to_keep == 10

    def test_none_values_ignored(self):
        opts = resolve_options({"alerts_read_days": None, "alerts_expired_days": 3})

        assert opts.alerts_read_days == 30
        assert opts.alerts_expired_days == 3

    def test_update_model_override(self):
        update = CleanupOptionsUpdate(messages_old_days=400)

        opts = resolve_options(update)

        assert opts.messages_old_days == 400
        assert opts.messages_archived_days == 90

    def test_full_options_passed_through(self):
        original = CleanupOptions(dry_run=True)

        assert resolve_options(original) is original

    def test_out_of_bounds_override_rejected(self):
        with pytest.raises(ValidationError):
            resolve_options({"completed_sessions_days": 0})

    def test_unknown_key_rejected(self):
        with pytest.raises(ValidationError) as exc:
            resolve_options({"dryrun": True})

        assert "dryrun" in str(exc.value)

    def test_update_model_rejects_unknown_key(self):
        with pytest.raises(ValidationError):
            CleanupOptionsUpdate.model_validate({"notification_read_days": 14})

    def test_camel_case_keys_accepted(self):
        opts = resolve_options({"dryRun": True, "notificationsReadDays": 14})

        assert opts.dry_run is True
        assert opts.notifications_read_days == 14

    def test_update_model_accepts_camel_case(self):
        update = CleanupOptionsUpdate.model_validate({"questionVersionsToKeep": 3})

        assert resolve_options(update).question_versions_to_keep == 3

    def test_update_model_validates_bounds(self):
        with pytest.raises(ValidationError):
            CleanupOptionsUpdate(feedback_resolved_days=5000)


class TestCleanupResult:
    """Test CleanupResult and DatabaseStats helpers."""

    def _result(self, total: int, errors=None) -> CleanupResult:
        errors = errors or []
        return CleanupResult(
            success=not errors,
            timestamp=datetime(2026, 6, 1, tzinfo=timezone.utc),
            duration_ms=12,
            results={"notifications": TaskResult(deleted=total)},
            total_deleted=total,
            errors=errors,
        )

    def test_has_errors(self):
        assert self._result(0).has_errors is False
        assert self._result(0, ["Alerts cleanup failed: boom"]).has_errors is True

    def test_anomaly_threshold(self):
        assert self._result(10000).is_anomaly() is False
        assert self._result(10001).is_anomaly() is True
        assert self._result(50).is_anomaly(threshold=10) is True

    def test_stats_totals(self):
        stats = DatabaseStats(
            timestamp=datetime(2026, 6, 1, tzinfo=timezone.utc),
            table_counts={"notifications": 7, "alerts": 3},
            estimated_cleanable={"notifications": 5, "alerts": 0},
        )

        assert stats.total_rows == 10
        assert stats.total_cleanable == 5
