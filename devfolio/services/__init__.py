"""
Service layer exports.
Provides business logic for the application.
"""
from devfolio.services.user_service import UserService
from devfolio.services.conversation_service import ConversationService
from devfolio.services.message_service import MessageService
from devfolio.services.project_service import ProjectService
from devfolio.services.review_service import ReviewService
from devfolio.services.thread_service import ThreadService
from devfolio.services.comment_service import CommentService

__all__ = [
    "UserService",
    "ConversationService",
    "MessageService",
    "ProjectService",
    "ReviewService",
    "ThreadService",
    "CommentService",
]
