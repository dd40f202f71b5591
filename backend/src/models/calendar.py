"""Calendar models - events, invitations and staff absences."""

from enum import Enum

from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey, Index

from .base import Base, new_id, utcnow


class StaffAbsenceStatus(str, Enum):
    """Absence request state. Everything except PENDING is terminal."""
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


class CalendarEvent(Base):
    """Calendar event.

    Recurring series are stored as a master event (is_recurring=True) plus
    child occurrences pointing at it through parent_event_id. Events created
    for a scheduled simulation carry simulation_id.
    """
    __tablename__ = "calendar_event"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(Text, nullable=False)
    type = Column(String(30), nullable=False, default="OTHER")
    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=False)

    is_recurring = Column(Boolean, nullable=False, default=False)
    recurrence_frequency = Column(String(20), nullable=True)
    parent_event_id = Column(
        String(36),
        ForeignKey("calendar_event.id", ondelete="CASCADE"),
        nullable=True,
    )
    simulation_id = Column(String(36), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        Index("ix_calendar_event_end_date", "end_date"),
    )


class EventInvitation(Base):
    """Invitation of a user or a group to a calendar event."""
    __tablename__ = "event_invitation"

    id = Column(String(36), primary_key=True, default=new_id)
    event_id = Column(
        String(36),
        ForeignKey("calendar_event.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(String(36), nullable=True)
    group_id = Column(String(36), nullable=True)
    status = Column(String(20), nullable=False, default="PENDING")


class StaffAbsence(Base):
    """Absence request filed by a collaborator."""
    __tablename__ = "staff_absence"

    id = Column(String(36), primary_key=True, default=new_id)
    requester_id = Column(String(36), nullable=False)
    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=False)
    reason = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default=StaffAbsenceStatus.PENDING.value)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        Index("ix_staff_absence_status_end", "status", "end_date"),
    )
