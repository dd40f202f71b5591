"""SQLAlchemy models for the school platform tables touched by retention"""

from .base import Base, utcnow, new_id
from .notification import Notification, AdminNotification, Alert
from .requests import (
    ContactRequest,
    ContactRequestStatus,
    JobApplication,
    JobApplicationStatus,
)
from .question import Question, QuestionVersion, QuestionFeedback, QuestionFeedbackStatus
from .messaging import Conversation, ConversationParticipant, Message
from .session import (
    SimulationSession,
    SimulationSessionStatus,
    SimulationSessionParticipant,
    SessionCheatingEvent,
    SessionMessage,
)
from .calendar import CalendarEvent, EventInvitation, StaffAbsence, StaffAbsenceStatus

__all__ = [
    "Base",
    "utcnow",
    "new_id",
    "Notification",
    "AdminNotification",
    "Alert",
    "ContactRequest",
    "ContactRequestStatus",
    "JobApplication",
    "JobApplicationStatus",
    "Question",
    "QuestionVersion",
    "QuestionFeedback",
    "QuestionFeedbackStatus",
    "Conversation",
    "ConversationParticipant",
    "Message",
    "SimulationSession",
    "SimulationSessionStatus",
    "SimulationSessionParticipant",
    "SessionCheatingEvent",
    "SessionMessage",
    "CalendarEvent",
    "EventInvitation",
    "StaffAbsence",
    "StaffAbsenceStatus",
]
