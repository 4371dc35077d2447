"""
User model and privacy enums.

A user owns a profile, projects and reviews, and carries the privacy and
messaging-permission settings consulted by the chat permission evaluator.
Social-graph edges live in UserFollow and UserBlock.
"""
import enum

from sqlalchemy import Boolean, Integer, String, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column

from devfolio.models.base import Base, UUIDMixin, TimestampMixin


def enum_values(enum_cls):
    """Persist enum values rather than member names."""
    return [member.value for member in enum_cls]


class UserRole(str, enum.Enum):
    """Enum for user roles."""
    USER = "user"
    ADMIN = "admin"


class ProfileVisibility(str, enum.Enum):
    """Who may see a user's profile details."""
    PUBLIC = "public"
    PRIVATE = "private"
    FOLLOWERS = "followers"


class MessagePermission(str, enum.Enum):
    """Who may open a new conversation with a user."""
    EVERYONE = "everyone"
    FOLLOWERS = "followers"
    EXISTING = "existing"
    NONE = "none"


DEFAULT_AVATAR = "https://ui-avatars.com/api/?background=00be62&color=fff&name="


class User(Base, UUIDMixin, TimestampMixin):
    """
    User model.

    Stores identity, profile fields and privacy settings. The password is
    stored as a bcrypt hash and never serialized.
    """

    __tablename__ = "users"

    # Identity
    username: Mapped[str] = mapped_column(
        String(30),
        unique=True,
        nullable=False,
        index=True,
        doc="Public handle (3-30 characters)"
    )

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        doc="Lower-cased email address"
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="bcrypt password hash"
    )

    # Profile
    avatar: Mapped[str] = mapped_column(String(500), default=DEFAULT_AVATAR, nullable=False)
    bio: Mapped[str] = mapped_column(String(500), default="", nullable=False)
    location: Mapped[str] = mapped_column(String(100), default="", nullable=False)
    website: Mapped[str] = mapped_column(String(200), default="", nullable=False)
    github: Mapped[str] = mapped_column(String(100), default="", nullable=False)
    twitter: Mapped[str] = mapped_column(String(100), default="", nullable=False)
    linkedin: Mapped[str] = mapped_column(String(100), default="", nullable=False)

    reputation: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    role: Mapped[UserRole] = mapped_column(
        SQLEnum(UserRole, name="user_role", native_enum=False, values_callable=enum_values),
        default=UserRole.USER,
        nullable=False
    )

    # Privacy
    profile_visibility: Mapped[ProfileVisibility] = mapped_column(
        SQLEnum(ProfileVisibility, name="profile_visibility", native_enum=False, values_callable=enum_values),
        default=ProfileVisibility.PUBLIC,
        nullable=False
    )

    show_email: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    message_permission: Mapped[MessagePermission] = mapped_column(
        SQLEnum(MessagePermission, name="message_permission", native_enum=False, values_callable=enum_values),
        default=MessagePermission.EVERYONE,
        nullable=False,
        doc="Who may open new conversations with this user"
    )

    allow_messages: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
        doc="Master switch for incoming first-contact messages"
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username})>"
