"""
Pydantic schema exports.
Provides request/response models for API endpoints.
"""
from devfolio.schemas.common import (
    DataResponse,
    PaginatedResponse,
    PaginationMeta,
    StatusResponse,
)
from devfolio.schemas.user import (
    RegisterRequest,
    LoginRequest,
    ProfileUpdate,
    PasswordChange,
    PrivacyUpdate,
    UserSummary,
    UserPublicProfile,
    UserPrivateProfile,
    AuthResponse,
    FollowStatus,
)
from devfolio.schemas.conversation import (
    LastMessageSummary,
    ConversationResponse,
    ConversationDeleteResult,
)
from devfolio.schemas.message import (
    MessageCreate,
    MessageResponse,
    ReceiptResponse,
    MarkReadResult,
)
from devfolio.schemas.project import (
    ProjectCreate,
    ProjectUpdate,
    ProjectResponse,
    LikeToggleResult,
)
from devfolio.schemas.review import (
    ReviewCreate,
    ReviewResponse,
    ReviewSummary,
    ProjectReviews,
)
from devfolio.schemas.thread import (
    ThreadSort,
    ThreadCreate,
    ThreadUpdate,
    ThreadResponse,
    VoteRequest,
    VoteResult,
    CommentCreate,
    CommentUpdate,
    CommentResponse,
)

__all__ = [
    "DataResponse",
    "PaginatedResponse",
    "PaginationMeta",
    "StatusResponse",
    "RegisterRequest",
    "LoginRequest",
    "ProfileUpdate",
    "PasswordChange",
    "PrivacyUpdate",
    "UserSummary",
    "UserPublicProfile",
    "UserPrivateProfile",
    "AuthResponse",
    "FollowStatus",
    "LastMessageSummary",
    "ConversationResponse",
    "ConversationDeleteResult",
    "MessageCreate",
    "MessageResponse",
    "ReceiptResponse",
    "MarkReadResult",
    "ProjectCreate",
    "ProjectUpdate",
    "ProjectResponse",
    "LikeToggleResult",
    "ReviewCreate",
    "ReviewResponse",
    "ReviewSummary",
    "ProjectReviews",
    "ThreadSort",
    "ThreadCreate",
    "ThreadUpdate",
    "ThreadResponse",
    "VoteRequest",
    "VoteResult",
    "CommentCreate",
    "CommentUpdate",
    "CommentResponse",
]
