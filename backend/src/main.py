"""FastAPI application for the school platform maintenance API.

Routes:
- /api/cron/cleanup  scheduled cleanup and statistics (cron secret)
- /health, /ready, /metrics  monitoring

The database engine belongs to the lifespan: created on startup, disposed on
shutdown. Handlers reach it through database.get_db.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError

from config import Settings, get_settings
from database import create_db_engine, create_session_factory
from observability.logging_config import configure_logging
from observability.middleware import RequestIDMiddleware
from observability.router import router as observability_router
from retention.router import router as retention_router

API_VERSION = "0.1.0"

logger = logging.getLogger(__name__)


def _summarize_errors(exc: RequestValidationError) -> list:
    """loc/msg/type of each error (ctx may hold exceptions, which are not JSON)."""
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Out-of-range thresholds, unknown options and malformed bodies."""
    details = _summarize_errors(exc)
    logger.warning(
        f"Rejected {request.method} {request.url.path}: invalid request",
        extra={"errors": details, "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "validation_error",
            "message": "Request validation failed",
            "details": details,
        },
    )


async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    # Full error goes to the log only
    logger.error(f"Database error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "database_error",
            "message": "A database error occurred. Please try again later.",
        },
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build a new application (settings from the environment by default).

    `settings` supplies the database URL for the lifespan engine and decides
    whether the docs are exposed. Each call returns an independent app.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            f"Starting school maintenance API (environment={settings.ENVIRONMENT}, debug={settings.DEBUG})"
        )

        engine = create_db_engine(settings.DATABASE_URL)
        app.state.db_engine = engine
        app.state.session_factory = create_session_factory(engine)

        try:
            yield
        finally:
            engine.dispose()
            logger.info("Database engine disposed, API stopped")

    docs_enabled = settings.ENVIRONMENT != "production"

    application = FastAPI(
        title="School Maintenance API",
        description="Scheduled data retention for the school management platform",
        version=API_VERSION,
        docs_url="/docs" if docs_enabled else None,
        redoc_url=None,
        openapi_url="/openapi.json" if docs_enabled else None,
        lifespan=lifespan,
    )

    application.add_middleware(RequestIDMiddleware)
    application.add_exception_handler(RequestValidationError, validation_exception_handler)
    application.add_exception_handler(SQLAlchemyError, database_exception_handler)

    application.include_router(observability_router)
    application.include_router(retention_router, prefix="/api")

    @application.get("/", include_in_schema=False)
    async def root() -> dict[str, Any]:
        return {"name": application.title, "version": API_VERSION, "status": "running"}

    return application


_settings = get_settings()
configure_logging(level=_settings.LOG_LEVEL, json_format=_settings.LOG_JSON)

app = create_app(_settings)


if __name__ == "__main__":
    import os
    import uvicorn

    uvicorn.run(
        "main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=_settings.ENVIRONMENT == "development",
        log_level=_settings.LOG_LEVEL.lower(),
    )
