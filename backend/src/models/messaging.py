"""Direct messaging models - conversations, participants and messages."""

from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey, Index

from .base import Base, new_id, utcnow


class Conversation(Base):
    """Conversation between two or more users.

    `last_message_at` is bumped whenever a message is sent and drives retention.
    """
    __tablename__ = "conversation"

    id = Column(String(36), primary_key=True, default=new_id)
    subject = Column(Text, nullable=True)
    last_message_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


class ConversationParticipant(Base):
    """Membership of a user in a conversation, with a per-user archive flag."""
    __tablename__ = "conversation_participant"

    id = Column(String(36), primary_key=True, default=new_id)
    conversation_id = Column(
        String(36),
        ForeignKey("conversation.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id = Column(String(36), nullable=False)
    is_archived = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index("ix_conversation_participant_conversation", "conversation_id"),
    )


class Message(Base):
    """Single message within a conversation."""
    __tablename__ = "message"

    id = Column(String(36), primary_key=True, default=new_id)
    conversation_id = Column(
        String(36),
        ForeignKey("conversation.id", ondelete="CASCADE"),
        nullable=False,
    )
    sender_id = Column(String(36), nullable=False)
    content = Column(Text, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        Index("ix_message_conversation_created", "conversation_id", "created_at"),
    )
