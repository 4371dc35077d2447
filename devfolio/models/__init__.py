"""
SQLAlchemy models for the Devfolio application.

All models must be imported here for Alembic auto-generation to work.
"""

# Import Base first
from devfolio.models.base import Base, TimestampMixin, UUIDMixin

# Import all models (order matters for relationships)
from devfolio.models.user import User, UserRole, ProfileVisibility, MessagePermission
from devfolio.models.user_block import UserFollow, UserBlock
from devfolio.models.conversation import Conversation, ConversationParticipant, UnreadCounts
from devfolio.models.message import Message, MessageReceipt
from devfolio.models.project import Project, ProjectLike, ProjectView, ProjectCategory, ProjectStatus
from devfolio.models.review import Review, ReviewRating
from devfolio.models.thread import Thread, ThreadVote, ThreadLike, ThreadView, ThreadCategory, VoteType
from devfolio.models.comment import Comment, CommentVote, CommentLike

# Export all models and enums
__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    # Users and social graph
    "User",
    "UserRole",
    "ProfileVisibility",
    "MessagePermission",
    "UserFollow",
    "UserBlock",
    # Conversations
    "Conversation",
    "ConversationParticipant",
    "UnreadCounts",
    # Messages
    "Message",
    "MessageReceipt",
    # Projects
    "Project",
    "ProjectLike",
    "ProjectView",
    "ProjectCategory",
    "ProjectStatus",
    # Reviews
    "Review",
    "ReviewRating",
    # Threads and comments
    "Thread",
    "ThreadVote",
    "ThreadLike",
    "ThreadView",
    "ThreadCategory",
    "VoteType",
    "Comment",
    "CommentVote",
    "CommentLike",
]
