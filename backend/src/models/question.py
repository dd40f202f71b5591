"""Question bank models - questions, their edit history and student feedback."""

from enum import Enum

from sqlalchemy import Column, String, Text, Integer, DateTime, ForeignKey, Index, UniqueConstraint
from sqlalchemy.types import JSON
from sqlalchemy.orm import relationship

from .base import Base, new_id, utcnow


class QuestionFeedbackStatus(str, Enum):
    """Review state of a feedback report. FIXED and REJECTED are resolved."""
    PENDING = "PENDING"
    REVIEWED = "REVIEWED"
    FIXED = "FIXED"
    REJECTED = "REJECTED"


class Question(Base):
    """Quiz question."""
    __tablename__ = "question"

    id = Column(String(36), primary_key=True, default=new_id)
    text = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default="DRAFT")

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    versions = relationship(
        "QuestionVersion",
        back_populates="question",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class QuestionVersion(Base):
    """Snapshot of a question taken on every edit.

    Retention keeps only the newest N versions (by `version`) per question.
    """
    __tablename__ = "question_version"

    id = Column(String(36), primary_key=True, default=new_id)
    question_id = Column(
        String(36),
        ForeignKey("question.id", ondelete="CASCADE"),
        nullable=False,
    )
    version = Column(Integer, nullable=False)
    snapshot = Column(JSON, nullable=True)
    change_reason = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    question = relationship("Question", back_populates="versions")

    __table_args__ = (
        UniqueConstraint("question_id", "version", name="uq_question_version"),
        Index("ix_question_version_question", "question_id", "version"),
    )


class QuestionFeedback(Base):
    """Error report on a question submitted by a student."""
    __tablename__ = "question_feedback"

    id = Column(String(36), primary_key=True, default=new_id)
    question_id = Column(
        String(36),
        ForeignKey("question.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id = Column(String(36), nullable=True)
    message = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default=QuestionFeedbackStatus.PENDING.value)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        Index("ix_question_feedback_status_created", "status", "created_at"),
    )
