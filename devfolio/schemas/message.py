"""
Message schemas for API request/response validation.
"""
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from devfolio.schemas.common import UTCDateTime
from devfolio.schemas.user import UserSummary


class MessageCreate(BaseModel):
    """
    Schema for sending a message.

    Length limits are enforced after trimming by MessageService so the
    configured maximum applies to the stored text.
    """

    content: str = Field(..., description="Message text")

    model_config = ConfigDict(
        json_schema_extra={"example": {"content": "Loved your latest project!"}}
    )


class ReceiptResponse(BaseModel):
    """A read receipt on a message."""

    user_id: str
    read_at: UTCDateTime

    model_config = ConfigDict(from_attributes=True)


class MessageResponse(BaseModel):
    """A message with its sender and read receipts."""

    id: str
    conversation_id: str
    sender: UserSummary
    content: str
    sequence_number: int
    created_at: UTCDateTime
    read_by: List[ReceiptResponse] = Field(default_factory=list, validation_alias="receipts")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class MarkReadResult(BaseModel):
    """Outcome of marking a conversation as read."""

    conversation_id: str
    marked_count: int
    unread_count: int = 0
