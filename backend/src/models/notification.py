"""Notification models - in-app notifications and alerts.

Notification carries a read/unread/archived state; AdminNotification is the
legacy staff feed (read state lives in a JSON list, so only age matters for
retention); Alert is a banner with an optional expiry.
"""

from sqlalchemy import Column, String, Text, Boolean, DateTime, Index
from sqlalchemy.types import JSON

from .base import Base, new_id, utcnow


class Notification(Base):
    """Per-user notification."""
    __tablename__ = "notification"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), nullable=False)
    type = Column(String(50), nullable=False, default="GENERAL")
    title = Column(Text, nullable=False)
    body = Column(Text, nullable=True)

    is_read = Column(Boolean, nullable=False, default=False)
    is_archived = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        Index("ix_notification_state_created", "is_read", "is_archived", "created_at"),
    )

    def __repr__(self):
        return (
            f"<Notification(id={self.id}, read={self.is_read}, "
            f"archived={self.is_archived}, created_at={self.created_at})>"
        )


class AdminNotification(Base):
    """Legacy admin notification feed."""
    __tablename__ = "admin_notification"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(Text, nullable=False)
    body = Column(Text, nullable=True)
    read_by = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)


class Alert(Base):
    """Dashboard alert, optionally expiring."""
    __tablename__ = "alert"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), nullable=True)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    expires_at = Column(DateTime(timezone=True), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
