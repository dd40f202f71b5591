"""Fixed table of cleanup tasks.

Every task is a CleanupTask descriptor with two functions of
(session, options, now):
- count: rows the task would remove (dry runs and statistics)
- purge: removes them and returns how many rows were removed

Neither function commits; the service owns the unit of work.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterator, List, Sequence, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from models import (
    Notification,
    AdminNotification,
    Alert,
    ContactRequest,
    JobApplication,
    QuestionFeedback,
    QuestionVersion,
    Conversation,
    ConversationParticipant,
    Message,
    SimulationSession,
    SimulationSessionParticipant,
    SessionCheatingEvent,
    SessionMessage,
    CalendarEvent,
    EventInvitation,
    StaffAbsence,
)
from . import policies
from .schemas import CleanupOptions

logger = logging.getLogger(__name__)

# Parent ids deleted per statement in cascading tasks (keeps IN lists small)
CASCADE_BATCH_SIZE = 500

TaskFn = Callable[[Session, CleanupOptions, datetime], int]
CriteriaFn = Callable[[CleanupOptions, datetime], ColumnElement]


@dataclass(frozen=True)
class CleanupTask:
    """Descriptor of one retention task."""
    name: str
    label: str
    count: TaskFn
    purge: TaskFn


@dataclass(frozen=True)
class CascadeStep:
    """Child collection removed before its parent: rows of `model` whose
    `foreign_key` column references a deleted parent id."""
    model: type
    foreign_key: str


@dataclass(frozen=True)
class CascadePlan:
    """Ordered child steps followed by the parent collection."""
    parent: type
    children: Tuple[CascadeStep, ...]


def _predicate_task(name: str, label: str, model: type, criteria: CriteriaFn) -> CleanupTask:
    """Single-table task: one COUNT or one bulk DELETE."""

    def count(db: Session, opts: CleanupOptions, now: datetime) -> int:
        return db.query(model).filter(criteria(opts, now)).count()

    def purge(db: Session, opts: CleanupOptions, now: datetime) -> int:
        deleted = (
            db.query(model)
            .filter(criteria(opts, now))
            .delete(synchronize_session=False)
        )
        return int(deleted or 0)

    return CleanupTask(name=name, label=label, count=count, purge=purge)


def _batched(ids: Sequence[str], size: int) -> Iterator[Sequence[str]]:
    for start in range(0, len(ids), size):
        yield ids[start:start + size]


def _cascade_task(name: str, label: str, plan: CascadePlan, criteria: CriteriaFn) -> CleanupTask:
    """Parent rows plus their dependents, children first.

    Eligible parent ids are collected before anything is deleted, because
    a predicate may depend on the child rows (e.g. participants' archive
    flags). The reported count is the number of parent rows.
    """
    parent = plan.parent

    def count(db: Session, opts: CleanupOptions, now: datetime) -> int:
        return db.query(parent).filter(criteria(opts, now)).count()

    def purge(db: Session, opts: CleanupOptions, now: datetime) -> int:
        parent_ids = [row[0] for row in db.query(parent.id).filter(criteria(opts, now)).all()]
        if not parent_ids:
            return 0

        children_deleted = {step.model.__tablename__: 0 for step in plan.children}
        parents_deleted = 0

        for chunk in _batched(parent_ids, CASCADE_BATCH_SIZE):
            for step in plan.children:
                column = getattr(step.model, step.foreign_key)
                deleted = (
                    db.query(step.model)
                    .filter(column.in_(chunk))
                    .delete(synchronize_session=False)
                )
                children_deleted[step.model.__tablename__] += int(deleted or 0)

            deleted = (
                db.query(parent)
                .filter(parent.id.in_(chunk))
                .delete(synchronize_session=False)
            )
            parents_deleted += int(deleted or 0)

        logger.debug(
            f"Cascade delete of {parent.__tablename__}",
            extra={"task": name, "deleted": parents_deleted, "children": children_deleted},
        )
        return parents_deleted

    return CleanupTask(name=name, label=label, count=count, purge=purge)


def _over_limit_questions(db: Session, keep: int) -> List[str]:
    """Questions holding more than `keep` versions."""
    rows = (
        db.query(QuestionVersion.question_id)
        .group_by(QuestionVersion.question_id)
        .having(func.count(QuestionVersion.id) > keep)
        .all()
    )
    return [row[0] for row in rows]


def _kept_version_ids(db: Session, question_id: str, keep: int) -> List[str]:
    """Ids of the newest `keep` versions of one question."""
    rows = (
        db.query(QuestionVersion.id)
        .filter(QuestionVersion.question_id == question_id)
        .order_by(QuestionVersion.version.desc())
        .limit(keep)
        .all()
    )
    return [row[0] for row in rows]


def _stale_versions(db: Session, question_id: str, keep_ids: List[str]):
    return db.query(QuestionVersion).filter(
        QuestionVersion.question_id == question_id,
        QuestionVersion.id.notin_(keep_ids),
    )


def count_question_versions(db: Session, opts: CleanupOptions, now: datetime) -> int:
    """Versions beyond the newest N, counted question by question."""
    keep = opts.question_versions_to_keep
    total = 0
    for question_id in _over_limit_questions(db, keep):
        keep_ids = _kept_version_ids(db, question_id, keep)
        total += _stale_versions(db, question_id, keep_ids).count()
    return total


def purge_question_versions(db: Session, opts: CleanupOptions, now: datetime) -> int:
    """Keep the newest N versions of every question, regardless of age.

    "Newest" is scoped to each question, so this runs one query pair per
    question over the limit.
    """
    keep = opts.question_versions_to_keep
    question_ids = _over_limit_questions(db, keep)
    if not question_ids:
        logger.debug("No question versions to prune", extra={"task": "question_versions"})
        return 0

    total = 0
    for question_id in question_ids:
        keep_ids = _kept_version_ids(db, question_id, keep)
        deleted = _stale_versions(db, question_id, keep_ids).delete(synchronize_session=False)
        total += int(deleted or 0)
    return total


CONVERSATION_CASCADE = CascadePlan(
    parent=Conversation,
    children=(
        CascadeStep(Message, "conversation_id"),
        CascadeStep(ConversationParticipant, "conversation_id"),
    ),
)

SIMULATION_SESSION_CASCADE = CascadePlan(
    parent=SimulationSession,
    children=(
        CascadeStep(SessionCheatingEvent, "session_id"),
        CascadeStep(SessionMessage, "session_id"),
        CascadeStep(SimulationSessionParticipant, "session_id"),
    ),
)

CALENDAR_EVENT_CASCADE = CascadePlan(
    parent=CalendarEvent,
    children=(
        CascadeStep(EventInvitation, "event_id"),
    ),
)


def validate_tasks(tasks: Sequence[CleanupTask]) -> Tuple[CleanupTask, ...]:
    """Check a task table once, before it is used.

    Raises:
        ValueError: If the table is empty or names are not unique
    """
    if not tasks:
        raise ValueError("At least one cleanup task is required")

    seen = set()
    for task in tasks:
        if not task.name:
            raise ValueError("Cleanup task name must not be empty")
        if task.name in seen:
            raise ValueError(f"Duplicate cleanup task name: {task.name}")
        seen.add(task.name)

    return tuple(tasks)


CLEANUP_TASKS: Tuple[CleanupTask, ...] = validate_tasks([
    _predicate_task("notifications", "Notifications", Notification, policies.notification_criteria),
    _predicate_task("admin_notifications", "Admin notifications", AdminNotification, policies.admin_notification_criteria),
    _predicate_task("alerts", "Alerts", Alert, policies.alert_criteria),
    _predicate_task("contact_requests", "Contact requests", ContactRequest, policies.contact_request_criteria),
    _predicate_task("job_applications", "Job applications", JobApplication, policies.job_application_criteria),
    _predicate_task("question_feedback", "Question feedback", QuestionFeedback, policies.question_feedback_criteria),
    CleanupTask(
        name="question_versions",
        label="Question versions",
        count=count_question_versions,
        purge=purge_question_versions,
    ),
    _cascade_task("conversations", "Conversations", CONVERSATION_CASCADE, policies.conversation_criteria),
    _predicate_task("session_cheating_events", "Session cheating events", SessionCheatingEvent, policies.session_cheating_event_criteria),
    _predicate_task("session_messages", "Session messages", SessionMessage, policies.session_message_criteria),
    _cascade_task("simulation_sessions", "Simulation sessions", SIMULATION_SESSION_CASCADE, policies.simulation_session_criteria),
    _cascade_task("calendar_events", "Calendar events", CALENDAR_EVENT_CASCADE, policies.calendar_event_criteria),
    _predicate_task("staff_absences", "Staff absences", StaffAbsence, policies.staff_absence_criteria),
])
