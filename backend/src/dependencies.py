"""Global FastAPI dependencies.

This module provides:
- verify_cron_secret: Shared-secret check for scheduler-triggered endpoints
- get_retention_service: RetentionService bound to the request's session
"""

import hmac
import logging

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session
from typing import Optional

from config import Settings, get_settings
from database import get_db
from retention.service import RetentionService

logger = logging.getLogger(__name__)


def _extract_token(authorization: str) -> str:
    """Accept both "Bearer TOKEN" and a bare "TOKEN"."""
    if authorization.startswith("Bearer "):
        return authorization[len("Bearer "):]
    return authorization


def verify_cron_secret(
    authorization: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> None:
    """Reject requests whose Authorization header does not carry CRON_SECRET.

    If no secret is configured every request is rejected.

    Raises:
        HTTPException 401: Missing, wrong or unconfigured secret
    """
    if not settings.CRON_SECRET:
        logger.error("CRON_SECRET not configured, rejecting cron request")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )

    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )

    token = _extract_token(authorization)
    if not hmac.compare_digest(token.encode(), settings.CRON_SECRET.encode()):
        logger.warning("Cron request with invalid secret")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )


def get_retention_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> RetentionService:
    """RetentionService for the current request."""
    return RetentionService(db, anomaly_threshold=settings.RETENTION_ANOMALY_THRESHOLD)
