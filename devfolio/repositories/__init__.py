"""
Repository layer exports.
Provides database access layer for the application.
"""
from devfolio.repositories.base import BaseRepository
from devfolio.repositories.user_repo import UserRepository
from devfolio.repositories.conversation_repo import ConversationRepository
from devfolio.repositories.message_repo import MessageRepository
from devfolio.repositories.project_repo import ProjectRepository
from devfolio.repositories.review_repo import ReviewRepository
from devfolio.repositories.reactions import ReactionRepository
from devfolio.repositories.thread_repo import ThreadRepository
from devfolio.repositories.comment_repo import CommentRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "ConversationRepository",
    "MessageRepository",
    "ProjectRepository",
    "ReviewRepository",
    "ReactionRepository",
    "ThreadRepository",
    "CommentRepository",
]
