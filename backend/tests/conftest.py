"""Pytest fixtures for retention testing.

Provides reusable test fixtures for:
- In-memory SQLite database with all tables created per test
- RetentionService with a frozen clock
- Test client with the cron secret configured

Usage:
    def test_cleanup_endpoint(client, cron_headers):
        response = client.post("/api/cron/cleanup", headers=cron_headers)
        assert response.status_code == 200
"""

import sys
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Generator

# Set environment variables BEFORE any imports to ensure they take effect
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("CRON_SECRET", "test-cron-secret")
os.environ.setdefault("LOG_JSON", "false")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

backend_src = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(backend_src))

from models import Base
from config import Settings, get_settings
from database import create_session_factory, get_db
from dependencies import get_retention_service
from retention.service import RetentionService

# Fixed "now" for every time-based test
NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)
CRON_SECRET = "test-cron-secret"


@pytest.fixture(scope="function")
def engine() -> Generator[Engine, None, None]:
    """In-memory SQLite engine shared across threads (TestClient runs in a worker thread)."""
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    try:
        yield test_engine
    finally:
        Base.metadata.drop_all(bind=test_engine)
        test_engine.dispose()


@pytest.fixture(scope="function")
def db_session(engine: Engine) -> Generator[Session, None, None]:
    """Create a fresh database session for each test."""
    session = create_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def seed(db_session: Session) -> Callable:
    """Add rows and commit them (the service rolls back uncommitted work)."""

    def _seed(*rows):
        db_session.add_all(rows)
        db_session.commit()
        return rows

    return _seed


@pytest.fixture
def service(db_session: Session) -> RetentionService:
    """RetentionService whose clock is frozen at NOW."""
    return RetentionService(db_session, clock=lambda: NOW)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        DATABASE_URL="sqlite://",
        CRON_SECRET=CRON_SECRET,
        LOG_JSON=False,
        ENVIRONMENT="test",
    )


@pytest.fixture
def cron_headers() -> dict:
    return {"Authorization": f"Bearer {CRON_SECRET}"}


@pytest.fixture
def client(db_session: Session, test_settings: Settings) -> Generator[TestClient, None, None]:
    """Test client wired to the test session and settings.

    The client is not used as a context manager, so the application
    lifespan (which would create a real engine) does not run.
    """
    from main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_retention_service] = lambda: RetentionService(
        db_session,
        clock=lambda: NOW,
    )

    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
