"""
UserFollow and UserBlock models for the social graph.

Both are directed edges keyed by the (source, target) pair.
"""
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from devfolio.models.base import Base
from devfolio.utils.datetime_utils import utc_now


class UserFollow(Base):
    """
    UserFollow model - ``follower_id`` follows ``followed_id``.

    A user's ``followers`` are the rows where they are ``followed_id``;
    their ``following`` are the rows where they are ``follower_id``.
    """

    __tablename__ = "user_follows"

    follower_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
        doc="User who follows"
    )

    followed_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
        doc="User being followed"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False
    )

    __table_args__ = (
        CheckConstraint("follower_id <> followed_id", name="ck_user_follows_not_self"),
    )

    def __repr__(self) -> str:
        return f"<UserFollow(follower_id={self.follower_id}, followed_id={self.followed_id})>"


class UserBlock(Base):
    """
    UserBlock model - tracks which users have blocked each other.

    When a user blocks another:
    - Follow edges between them are removed in both directions
    - Neither can open a conversation with the other
    - Neither can send into an existing conversation with the other
    """

    __tablename__ = "user_blocks"

    blocker_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
        doc="User who is blocking"
    )

    blocked_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
        doc="User who is being blocked"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
        doc="When the block was created"
    )

    __table_args__ = (
        CheckConstraint("blocker_id <> blocked_id", name="ck_user_blocks_not_self"),
    )

    def __repr__(self) -> str:
        return f"<UserBlock(blocker_id={self.blocker_id}, blocked_id={self.blocked_id})>"


# Indexes for reverse lookups
Index("idx_user_follows_followed", UserFollow.followed_id)
Index("idx_user_blocks_blocked", UserBlock.blocked_id)
