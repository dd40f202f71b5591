"""Unit tests for the application factory."""

from fastapi.testclient import TestClient

import main
from config import Settings


def _settings(**overrides) -> Settings:
    values = {
        "DATABASE_URL": "sqlite://",
        "CRON_SECRET": "test-cron-secret",
        "LOG_JSON": False,
        "ENVIRONMENT": "test",
    }
    values.update(overrides)
    return Settings(**values)


def test_each_call_builds_new_app():
    first = main.create_app(_settings())
    second = main.create_app(_settings())

    assert first is not second
    assert first is not main.app


def test_routes_registered():
    paths = {route.path for route in main.create_app(_settings()).routes}

    assert "/api/cron/cleanup" in paths
    assert "/health" in paths
    assert "/ready" in paths


def test_docs_hidden_in_production():
    app = main.create_app(_settings(ENVIRONMENT="production"))

    assert app.docs_url is None
    assert app.openapi_url is None
    assert main.create_app(_settings()).docs_url == "/docs"


def test_lifespan_owns_engine():
    app = main.create_app(_settings())

    with TestClient(app) as client:
        assert app.state.session_factory is not None
        response = client.get("/ready")

    assert response.status_code == 200
    assert response.json()["status"] == "ready"
