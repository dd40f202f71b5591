"""Health checks for the retention backend.

Two components are probed:
- database: the store answers a trivial query
- schema: every table the cleanup tasks touch exists
"""

import time
from enum import Enum
from typing import Dict, Iterable, Optional
from dataclasses import dataclass, field

from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .logging_config import get_logger

logger = get_logger(__name__)


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    DEGRADED = "degraded"


@dataclass
class ComponentHealth:
    """Probe outcome for one component."""
    status: HealthStatus
    message: Optional[str] = None
    latency_ms: Optional[float] = None
    details: Dict[str, list] = field(default_factory=dict)

    def as_dict(self) -> dict:
        data = {
            "status": self.status.value,
            "message": self.message,
            "latency_ms": self.latency_ms,
        }
        if self.details:
            data["details"] = self.details
        return data


def check_database_health(db: Session) -> ComponentHealth:
    """Round-trip a SELECT 1 and report its latency."""
    start = time.perf_counter()
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}", exc_info=True)
        return ComponentHealth(
            status=HealthStatus.UNHEALTHY,
            message=f"Database error: {e}",
        )

    return ComponentHealth(
        status=HealthStatus.HEALTHY,
        message="Database connection OK",
        latency_ms=round((time.perf_counter() - start) * 1000, 2),
    )


def check_schema_health(db: Session, expected_tables: Iterable[str]) -> ComponentHealth:
    """Report tables the cleanup tasks expect but the store lacks.

    Missing tables degrade the service: the affected tasks fail on every
    run while the others keep working.
    """
    try:
        present = set(inspect(db.get_bind()).get_table_names())
    except SQLAlchemyError as e:
        logger.error(f"Schema health check failed: {e}", exc_info=True)
        return ComponentHealth(status=HealthStatus.UNHEALTHY, message=f"Database error: {e}")

    missing = sorted(set(expected_tables) - present)
    if missing:
        logger.warning(f"Retention tables missing: {', '.join(missing)}")
        return ComponentHealth(
            status=HealthStatus.DEGRADED,
            message=f"{len(missing)} table(s) missing",
            details={"missing_tables": missing},
        )

    return ComponentHealth(status=HealthStatus.HEALTHY, message="All retention tables present")


def get_overall_health(components: Dict[str, ComponentHealth]) -> HealthStatus:
    """Worst status wins: any UNHEALTHY component makes the whole UNHEALTHY."""
    statuses = {c.status for c in components.values()}

    if HealthStatus.UNHEALTHY in statuses:
        return HealthStatus.UNHEALTHY
    if HealthStatus.DEGRADED in statuses:
        return HealthStatus.DEGRADED
    return HealthStatus.HEALTHY
