"""Database engine and session factories.

The engine is never created at import time. Each process entry point
(FastAPI lifespan, CLI, Celery task) builds its own engine with
create_db_engine() and disposes it when it shuts down.
"""

from contextlib import contextmanager
from typing import Generator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session


def create_db_engine(database_url: str, **overrides) -> Engine:
    """Create a SQLAlchemy engine for the given URL.

    Pool settings only apply to PostgreSQL (not SQLite).

    Args:
        database_url: SQLAlchemy connection URL
        **overrides: Extra keyword arguments passed to create_engine

    Returns:
        Engine: Configured engine (no connection is opened yet)
    """
    engine_kwargs = {
        "pool_pre_ping": True,  # Verify connections before using
        "echo": False,
    }

    if not database_url.startswith("sqlite"):
        engine_kwargs["pool_size"] = 5
        engine_kwargs["max_overflow"] = 10

    engine_kwargs.update(overrides)
    return create_engine(database_url, **engine_kwargs)


def create_session_factory(engine: Engine) -> sessionmaker:
    """Create the session factory bound to an engine."""
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
    )


@contextmanager
def session_scope(session_factory: sessionmaker) -> Generator[Session, None, None]:
    """Context manager for sessions outside of a request.

    Usage:
        with session_scope(factory) as session:
            RetentionService(session).run_cleanup()

    Rolls back anything left uncommitted on exception. Commits are left to
    the caller because the retention service commits per task.
    """
    session = session_factory()
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency for FastAPI endpoints.

    The session factory is created by the application lifespan and stored
    on app.state.

    Usage:
        @router.get("/stats")
        def stats(db: Session = Depends(get_db)):
            return RetentionService(db).get_statistics()
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
