"""Live simulation session models (virtual room).

A SimulationSession is a proctored, synchronous run of a simulation. While it
is running it accumulates participants, chat messages and cheating events;
all of it is transient telemetry.
"""

from enum import Enum

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Index
from sqlalchemy.types import JSON

from .base import Base, new_id, utcnow


class SimulationSessionStatus(str, Enum):
    """Session lifecycle.

    WAITING → STARTED → COMPLETED
        ↓         ↓
      CANCELLED ← CANCELLED

    COMPLETED and CANCELLED are terminal.
    """
    WAITING = "WAITING"
    STARTED = "STARTED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class SimulationSession(Base):
    """Proctored simulation session."""
    __tablename__ = "simulation_session"

    id = Column(String(36), primary_key=True, default=new_id)
    simulation_id = Column(String(36), nullable=False)
    status = Column(String(20), nullable=False, default=SimulationSessionStatus.WAITING.value)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index("ix_simulation_session_status_updated", "status", "updated_at"),
    )


class SimulationSessionParticipant(Base):
    """Student connected to a session."""
    __tablename__ = "simulation_session_participant"

    id = Column(String(36), primary_key=True, default=new_id)
    session_id = Column(
        String(36),
        ForeignKey("simulation_session.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    student_id = Column(String(36), nullable=False)
    joined_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


class SessionCheatingEvent(Base):
    """Proctoring event (tab switch, focus loss, ...)."""
    __tablename__ = "session_cheating_event"

    id = Column(String(36), primary_key=True, default=new_id)
    session_id = Column(
        String(36),
        ForeignKey("simulation_session.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    student_id = Column(String(36), nullable=False)
    event_type = Column(String(50), nullable=False)
    details = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)


class SessionMessage(Base):
    """Chat message between proctor and a student during a session."""
    __tablename__ = "session_message"

    id = Column(String(36), primary_key=True, default=new_id)
    session_id = Column(
        String(36),
        ForeignKey("simulation_session.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    sender_id = Column(String(36), nullable=False)
    content = Column(Text, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
