"""Integration tests for the scheduled cleanup endpoint.

Tests cron secret enforcement, cleanup runs with option overrides and
database statistics over HTTP.
"""

from datetime import datetime, timedelta, timezone

import pytest

from config import Settings, get_settings
from models import Notification, JobApplication

NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)
URL = "/api/cron/cleanup"


def ago(days: float) -> datetime:
    return NOW - timedelta(days=days)


class TestCronAuthentication:

    def test_missing_header(self, client):
        response = client.post(URL)

        assert response.status_code == 401
        assert response.json()["detail"] == "Unauthorized"

    def test_wrong_secret(self, client):
        response = client.post(URL, headers={"Authorization": "Bearer nope"})

        assert response.status_code == 401

    def test_raw_token_accepted(self, client):
        response = client.get(URL, headers={"Authorization": "test-cron-secret"})

        assert response.status_code == 200

    def test_unconfigured_secret_rejects_everything(self, client, cron_headers):
        from main import app

        app.dependency_overrides[get_settings] = lambda: Settings(CRON_SECRET=None)

        response = client.post(URL, headers=cron_headers)

        assert response.status_code == 401

    @pytest.mark.parametrize("method", ["get", "post"])
    def test_both_methods_protected(self, client, method):
        response = getattr(client, method)(URL)

        assert response.status_code == 401


class TestRunCleanupEndpoint:

    def test_cleanup_without_body(self, client, cron_headers, db_session, seed):
        seed(
            Notification(user_id="u1", title="old", is_read=True, created_at=ago(45)),
            JobApplication(full_name="r", email="r@x.io", status="REJECTED", created_at=ago(400)),
        )

        response = client.post(URL, headers=cron_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["dry_run"] is False
        assert data["total_deleted"] == 2
        assert data["results"]["notifications"]["deleted"] == 1
        assert data["errors"] == []
        assert data["message"] == "Cleanup completed. Deleted 2 records."
        assert db_session.query(Notification).count() == 0

    def test_dry_run_override(self, client, cron_headers, db_session, seed):
        seed(Notification(user_id="u1", title="read 20d", is_read=True, created_at=ago(20)))

        response = client.post(
            URL,
            headers=cron_headers,
            json={"dry_run": True, "notifications_read_days": 14},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["dry_run"] is True
        assert data["results"]["notifications"]["deleted"] == 1
        assert db_session.query(Notification).count() == 1

    def test_out_of_bounds_threshold(self, client, cron_headers, db_session, seed):
        seed(Notification(user_id="u1", title="old", is_read=True, created_at=ago(45)))

        response = client.post(URL, headers=cron_headers, json={"notifications_read_days": 0})

        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"
        assert db_session.query(Notification).count() == 1

    def test_camel_case_body(self, client, cron_headers, db_session, seed):
        seed(Notification(user_id="u1", title="old", is_read=True, created_at=ago(45)))

        response = client.post(URL, headers=cron_headers, json={"dryRun": True})

        assert response.status_code == 200
        assert response.json()["dry_run"] is True
        assert db_session.query(Notification).count() == 1

    def test_unknown_option_rejected(self, client, cron_headers, db_session, seed):
        seed(Notification(user_id="u1", title="old", is_read=True, created_at=ago(45)))

        response = client.post(URL, headers=cron_headers, json={"dryrun": True})

        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"
        assert db_session.query(Notification).count() == 1

    def test_response_lists_every_task(self, client, cron_headers):
        response = client.post(URL, headers=cron_headers)

        results = response.json()["results"]
        assert list(results)[0] == "notifications"
        assert list(results)[-1] == "staff_absences"
        assert len(results) == 13


class TestStatisticsEndpoint:

    def test_statistics(self, client, cron_headers, seed):
        seed(
            Notification(user_id="u1", title="old", is_read=True, created_at=ago(45)),
            Notification(user_id="u1", title="new", is_read=False, created_at=ago(1)),
        )

        response = client.get(URL, headers=cron_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["table_counts"]["notifications"] == 2
        assert data["estimated_cleanable"]["notifications"] == 1
        assert data["table_counts"]["event_invitations"] == 0


class TestObservabilityEndpoints:

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["components"]["database"]["status"] == "healthy"

    def test_metrics(self, client, cron_headers):
        client.post(URL, headers=cron_headers)

        response = client.get("/metrics")

        assert response.status_code == 200
        assert "school_retention_run_duration_seconds" in response.text
