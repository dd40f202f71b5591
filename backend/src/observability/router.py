"""Monitoring endpoints: Prometheus scrape target, health and readiness."""

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from database import get_db
from models import Base
from .health import (
    check_database_health,
    check_schema_health,
    get_overall_health,
    HealthStatus,
)

router = APIRouter(tags=["Observability"])


@router.get("/metrics", include_in_schema=False)
def metrics():
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


@router.get(
    "/health",
    summary="Component health",
    description="Database connectivity and presence of the retention tables",
)
def health_check(db: Session = Depends(get_db)):
    """503 when a component is unhealthy; a degraded schema still answers 200."""
    components = {"database": check_database_health(db)}
    if components["database"].status == HealthStatus.HEALTHY:
        components["schema"] = check_schema_health(db, Base.metadata.tables.keys())

    overall = get_overall_health(components)

    return JSONResponse(
        content={
            "status": overall.value,
            "components": {name: comp.as_dict() for name, comp in components.items()},
        },
        status_code=503 if overall == HealthStatus.UNHEALTHY else 200,
    )


@router.get("/ready", summary="Readiness probe")
def readiness_check(db: Session = Depends(get_db)):
    db_health = check_database_health(db)

    if db_health.status != HealthStatus.HEALTHY:
        return JSONResponse(
            content={"status": "not_ready", "message": db_health.message},
            status_code=503,
        )

    return {"status": "ready", "message": "Cleanup endpoint can reach the database"}
