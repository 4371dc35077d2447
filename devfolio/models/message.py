"""
Message and MessageReceipt models.

Messages belong to exactly one conversation and carry per-reader receipts.
"""
from datetime import datetime
from typing import TYPE_CHECKING, List

from sqlalchemy import (
    BigInteger,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from devfolio.models.base import Base, UUIDMixin
from devfolio.utils.datetime_utils import utc_now

if TYPE_CHECKING:
    from devfolio.models.user import User


class Message(Base, UUIDMixin):
    """
    Message model for direct-message text.

    Messages are never hard-deleted individually; they are removed only when
    their conversation is deleted.
    """

    __tablename__ = "messages"

    conversation_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("conversations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="Conversation this message belongs to"
    )

    sender_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="User who sent the message"
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        doc="Trimmed message text"
    )

    # Sequence number for deterministic ordering
    sequence_number: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        doc="Monotonically increasing sequence number per conversation"
    )

    deleted: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
        doc="Soft delete flag"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
        index=True,
        doc="When the message was created"
    )

    # Relationships
    sender: Mapped["User"] = relationship(
        foreign_keys=[sender_id],
        lazy="selectin"
    )

    receipts: Mapped[List["MessageReceipt"]] = relationship(
        back_populates="message",
        cascade="all, delete-orphan",
        lazy="selectin"
    )

    __table_args__ = (
        UniqueConstraint("conversation_id", "sequence_number", name="uq_conversation_sequence"),
    )

    def __repr__(self) -> str:
        content_preview = self.content[:50] if self.content else ""
        return f"<Message(id={self.id}, seq={self.sequence_number}, content='{content_preview}...')>"


class MessageReceipt(Base):
    """
    MessageReceipt model - records that a user has read a message.

    At most one receipt exists per (message, user).
    """

    __tablename__ = "message_receipts"

    message_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("messages.id", ondelete="CASCADE"),
        primary_key=True,
        doc="Message ID"
    )

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
        doc="Reader user ID"
    )

    read_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
        doc="When the user read the message"
    )

    message: Mapped["Message"] = relationship(back_populates="receipts")

    def __repr__(self) -> str:
        return f"<MessageReceipt(message_id={self.message_id}, user_id={self.user_id})>"


# Composite index for message history sorted by sequence number
Index(
    "idx_messages_conversation_seq",
    Message.conversation_id,
    Message.sequence_number.desc(),
)

Index("idx_message_receipts_user", MessageReceipt.user_id)
