"""
Conversation schemas for API response shaping.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict

from devfolio.schemas.common import UTCDateTime
from devfolio.schemas.user import UserSummary


class LastMessageSummary(BaseModel):
    """Preview of a conversation's newest message."""

    id: str
    sender_id: str
    content: str
    sequence_number: int
    created_at: UTCDateTime

    model_config = ConfigDict(from_attributes=True)


class ConversationResponse(BaseModel):
    """
    A conversation as seen by one of its participants.

    ``participant`` is the other user and ``unread_count`` is the caller's
    own counter.
    """

    id: str
    participant: UserSummary
    last_message: Optional[LastMessageSummary] = None
    last_message_at: UTCDateTime
    unread_count: int = 0
    created_at: UTCDateTime
    updated_at: UTCDateTime

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "participant": {
                    "id": "123e4567-e89b-12d3-a456-426614174001",
                    "username": "grace",
                    "avatar": "https://example.com/grace.png"
                },
                "last_message": None,
                "last_message_at": "2026-01-02T03:04:05Z",
                "unread_count": 0,
                "created_at": "2026-01-02T03:04:05Z",
                "updated_at": "2026-01-02T03:04:05Z"
            }
        }
    )


class ConversationDeleteResult(BaseModel):
    """Outcome of deleting a conversation."""

    conversation_id: str
    messages_deleted: int
