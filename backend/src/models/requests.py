"""Inbound requests - contact form submissions and job applications."""

from enum import Enum

from sqlalchemy import Column, String, Text, DateTime, Index

from .base import Base, new_id, utcnow


class ContactRequestStatus(str, Enum):
    """Lifecycle of a contact request.

    REPLIED and ARCHIVED are terminal.
    """
    PENDING = "PENDING"
    READ = "READ"
    REPLIED = "REPLIED"
    ARCHIVED = "ARCHIVED"


class JobApplicationStatus(str, Enum):
    """Lifecycle of a job application.

    APPROVED and REJECTED are terminal; only REJECTED ones are purged.
    """
    PENDING = "PENDING"
    REVIEWING = "REVIEWING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class ContactRequest(Base):
    """Public contact form submission."""
    __tablename__ = "contact_request"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(Text, nullable=False)
    email = Column(Text, nullable=False)
    message = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default=ContactRequestStatus.PENDING.value)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        Index("ix_contact_request_status_created", "status", "created_at"),
    )


class JobApplication(Base):
    """Collaborator job application."""
    __tablename__ = "job_application"

    id = Column(String(36), primary_key=True, default=new_id)
    full_name = Column(Text, nullable=False)
    email = Column(Text, nullable=False)
    subject = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default=JobApplicationStatus.PENDING.value)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        Index("ix_job_application_status_created", "status", "created_at"),
    )
