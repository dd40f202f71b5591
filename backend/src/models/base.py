"""Base SQLAlchemy declarative base for all models"""

import uuid
from datetime import datetime, timezone

from sqlalchemy.orm import declarative_base


def utcnow() -> datetime:
    """Timezone-aware current UTC time (used for column defaults and cutoffs)."""
    return datetime.now(timezone.utc)


def new_id() -> str:
    """Generate a primary key (UUID4 string, portable across PostgreSQL and SQLite)."""
    return str(uuid.uuid4())


Base = declarative_base()
