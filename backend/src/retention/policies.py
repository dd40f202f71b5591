"""Eligibility predicates for every retention policy.

Each function maps (options, now) to a SQLAlchemy boolean clause. Cutoffs are
strict: a row whose timestamp equals `now - threshold` is kept.
"""

from datetime import datetime, timedelta

from sqlalchemy import and_, or_, exists
from sqlalchemy.sql.elements import ColumnElement

from models import (
    Notification,
    AdminNotification,
    Alert,
    ContactRequest,
    ContactRequestStatus,
    JobApplication,
    JobApplicationStatus,
    QuestionFeedback,
    QuestionFeedbackStatus,
    Conversation,
    ConversationParticipant,
    SimulationSession,
    SimulationSessionStatus,
    SessionCheatingEvent,
    SessionMessage,
    CalendarEvent,
    StaffAbsence,
    StaffAbsenceStatus,
)
from .schemas import CleanupOptions

CONTACT_REQUEST_TERMINAL = (
    ContactRequestStatus.REPLIED.value,
    ContactRequestStatus.ARCHIVED.value,
)
JOB_APPLICATION_TERMINAL = (JobApplicationStatus.REJECTED.value,)
FEEDBACK_TERMINAL = (
    QuestionFeedbackStatus.FIXED.value,
    QuestionFeedbackStatus.REJECTED.value,
)
SESSION_TERMINAL = (
    SimulationSessionStatus.COMPLETED.value,
    SimulationSessionStatus.CANCELLED.value,
)
ABSENCE_TERMINAL = (
    StaffAbsenceStatus.CONFIRMED.value,
    StaffAbsenceStatus.REJECTED.value,
    StaffAbsenceStatus.CANCELLED.value,
)


def days_ago(now: datetime, days: int) -> datetime:
    """Cutoff timestamp `days` days before `now`."""
    return now - timedelta(days=days)


def notification_criteria(opts: CleanupOptions, now: datetime) -> ColumnElement:
    """Archived notifications age fastest, unread ones slowest."""
    read_cutoff = days_ago(now, opts.notifications_read_days)
    unread_cutoff = days_ago(now, opts.notifications_unread_days)
    archived_cutoff = days_ago(now, opts.notifications_archived_days)

    return or_(
        and_(
            Notification.is_read.is_(True),
            Notification.is_archived.is_(False),
            Notification.created_at < read_cutoff,
        ),
        and_(
            Notification.is_read.is_(False),
            Notification.is_archived.is_(False),
            Notification.created_at < unread_cutoff,
        ),
        and_(
            Notification.is_archived.is_(True),
            Notification.created_at < archived_cutoff,
        ),
    )


def admin_notification_criteria(opts: CleanupOptions, now: datetime) -> ColumnElement:
    return AdminNotification.created_at < days_ago(now, opts.admin_notifications_days)


def alert_criteria(opts: CleanupOptions, now: datetime) -> ColumnElement:
    """Expired for long enough, or read and old."""
    return or_(
        and_(
            Alert.expires_at.isnot(None),
            Alert.expires_at < days_ago(now, opts.alerts_expired_days),
        ),
        and_(
            Alert.is_read.is_(True),
            Alert.created_at < days_ago(now, opts.alerts_read_days),
        ),
    )


def contact_request_criteria(opts: CleanupOptions, now: datetime) -> ColumnElement:
    return and_(
        ContactRequest.status.in_(CONTACT_REQUEST_TERMINAL),
        ContactRequest.created_at < days_ago(now, opts.contact_requests_processed_days),
    )


def job_application_criteria(opts: CleanupOptions, now: datetime) -> ColumnElement:
    return and_(
        JobApplication.status.in_(JOB_APPLICATION_TERMINAL),
        JobApplication.created_at < days_ago(now, opts.job_applications_rejected_days),
    )


def question_feedback_criteria(opts: CleanupOptions, now: datetime) -> ColumnElement:
    return and_(
        QuestionFeedback.status.in_(FEEDBACK_TERMINAL),
        QuestionFeedback.created_at < days_ago(now, opts.feedback_resolved_days),
    )


def conversation_criteria(opts: CleanupOptions, now: datetime) -> ColumnElement:
    """Archived by every participant and idle, or idle for the long threshold.

    A conversation without participants never counts as archived.
    """
    has_participants = exists().where(
        ConversationParticipant.conversation_id == Conversation.id
    )
    has_active_participant = exists().where(
        and_(
            ConversationParticipant.conversation_id == Conversation.id,
            ConversationParticipant.is_archived.is_(False),
        )
    )

    return or_(
        and_(
            has_participants,
            ~has_active_participant,
            Conversation.last_message_at < days_ago(now, opts.messages_archived_days),
        ),
        Conversation.last_message_at < days_ago(now, opts.messages_old_days),
    )


def session_cheating_event_criteria(opts: CleanupOptions, now: datetime) -> ColumnElement:
    return SessionCheatingEvent.created_at < days_ago(now, opts.session_events_days)


def session_message_criteria(opts: CleanupOptions, now: datetime) -> ColumnElement:
    return SessionMessage.created_at < days_ago(now, opts.session_messages_days)


def simulation_session_criteria(opts: CleanupOptions, now: datetime) -> ColumnElement:
    """WAITING and STARTED sessions are never eligible."""
    return and_(
        SimulationSession.status.in_(SESSION_TERMINAL),
        SimulationSession.updated_at < days_ago(now, opts.completed_sessions_days),
    )


def calendar_event_criteria(opts: CleanupOptions, now: datetime) -> ColumnElement:
    """Past one-off events only.

    Recurring masters, occurrences of a series and events linked to a
    simulation are excluded regardless of age.
    """
    return and_(
        CalendarEvent.end_date < days_ago(now, opts.old_calendar_events_days),
        CalendarEvent.is_recurring.is_(False),
        CalendarEvent.parent_event_id.is_(None),
        CalendarEvent.simulation_id.is_(None),
    )


def staff_absence_criteria(opts: CleanupOptions, now: datetime) -> ColumnElement:
    """PENDING absences are never eligible."""
    return and_(
        StaffAbsence.status.in_(ABSENCE_TERMINAL),
        StaffAbsence.end_date < days_ago(now, opts.old_staff_absences_days),
    )
