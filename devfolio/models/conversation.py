"""
Conversation and ConversationParticipant models.

A conversation is a one-to-one chat between exactly two users. The pair is
stored sorted (``participant_low_id`` < ``participant_high_id``) so that a
unique constraint over the two columns enforces one conversation per
unordered pair.
"""
from collections.abc import Mapping
from datetime import datetime
from typing import TYPE_CHECKING, Dict, Iterator, List, Optional, Tuple

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from devfolio.models.base import Base, UUIDMixin, TimestampMixin
from devfolio.utils.datetime_utils import utc_now

if TYPE_CHECKING:
    from devfolio.models.user import User
    from devfolio.models.message import Message


def participant_pair(user_a_id: str, user_b_id: str) -> Tuple[str, str]:
    """Return the canonical (low, high) ordering of two user IDs."""
    if user_a_id == user_b_id:
        raise ValueError("A conversation needs two distinct participants")
    return (user_a_id, user_b_id) if user_a_id < user_b_id else (user_b_id, user_a_id)


class UnreadCounts(Mapping):
    """
    Read-only mapping of participant ID to unread message count.

    Lookups for IDs that have no recorded counter return 0 instead of
    raising KeyError; iteration and ``len`` only cover recorded counters.
    """

    def __init__(self, counts: Optional[Dict[str, int]] = None):
        self._counts = dict(counts or {})

    def __getitem__(self, user_id: str) -> int:
        return self._counts.get(user_id, 0)

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._counts

    def __iter__(self) -> Iterator[str]:
        return iter(self._counts)

    def __len__(self) -> int:
        return len(self._counts)

    def total(self) -> int:
        """Sum of all recorded counters."""
        return sum(self._counts.values())

    def __repr__(self) -> str:
        return f"UnreadCounts({self._counts!r})"


class Conversation(Base, UUIDMixin, TimestampMixin):
    """
    Conversation model for direct messages between two users.
    """

    __tablename__ = "conversations"

    participant_low_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        doc="Lexicographically smaller participant ID"
    )

    participant_high_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        doc="Lexicographically larger participant ID"
    )

    last_message_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("messages.id", ondelete="SET NULL", use_alter=True, name="fk_conversations_last_message"),
        nullable=True,
        doc="Most recent message in the conversation"
    )

    last_message_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
        doc="Timestamp of the most recent message (creation time until the first message)"
    )

    last_sequence: Mapped[int] = mapped_column(
        BigInteger,
        default=0,
        nullable=False,
        doc="Sequence number of the most recent message"
    )

    # Relationships
    participants: Mapped[List["ConversationParticipant"]] = relationship(
        back_populates="conversation",
        cascade="all, delete-orphan",
        lazy="selectin"
    )

    last_message: Mapped["Message | None"] = relationship(
        foreign_keys=[last_message_id],
        post_update=True,
        lazy="selectin"
    )

    __table_args__ = (
        UniqueConstraint("participant_low_id", "participant_high_id", name="uq_conversations_pair"),
        CheckConstraint("participant_low_id < participant_high_id", name="ck_conversations_pair_order"),
    )

    @property
    def participant_ids(self) -> Tuple[str, str]:
        return (self.participant_low_id, self.participant_high_id)

    def has_participant(self, user_id: str) -> bool:
        """Check whether a user is one of the two participants."""
        return user_id in self.participant_ids

    def get_other_participant_id(self, user_id: str) -> str:
        """Return the ID of the participant who is not ``user_id``."""
        if user_id == self.participant_low_id:
            return self.participant_high_id
        if user_id == self.participant_high_id:
            return self.participant_low_id
        raise ValueError(f"User {user_id} is not a participant of conversation {self.id}")

    @property
    def unread_counts(self) -> UnreadCounts:
        """Per-participant unread counters."""
        return UnreadCounts({p.user_id: p.unread_count for p in self.participants})

    def __repr__(self) -> str:
        return (
            f"<Conversation(id={self.id}, participants=({self.participant_low_id}, "
            f"{self.participant_high_id}))>"
        )


class ConversationParticipant(Base):
    """
    ConversationParticipant model - one row per participant per conversation.

    Holds the participant's unread counter.
    """

    __tablename__ = "conversation_participants"

    conversation_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("conversations.id", ondelete="CASCADE"),
        primary_key=True,
        doc="Conversation ID"
    )

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
        doc="User ID"
    )

    unread_count: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
        doc="Messages in this conversation not yet read by the user"
    )

    # Relationships
    conversation: Mapped["Conversation"] = relationship(back_populates="participants")
    user: Mapped["User"] = relationship(lazy="selectin")

    def __repr__(self) -> str:
        return (
            f"<ConversationParticipant(conversation_id={self.conversation_id}, "
            f"user_id={self.user_id}, unread_count={self.unread_count})>"
        )


# Indexes for performance
Index("idx_conversation_participants_user", ConversationParticipant.user_id)
Index("idx_conversations_last_message_at", Conversation.last_message_at.desc())
