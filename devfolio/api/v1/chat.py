"""
Chat API routes.
Provides direct conversations between two users and their messages.
"""
from typing import List

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from devfolio.config import settings
from devfolio.core.database import get_db
from devfolio.core.rate_limit import limiter
from devfolio.dependencies import get_current_user, get_pagination_params
from devfolio.models.user import User
from devfolio.schemas.common import DataResponse, PaginatedResponse
from devfolio.schemas.conversation import ConversationDeleteResult, ConversationResponse
from devfolio.schemas.message import MarkReadResult, MessageCreate, MessageResponse
from devfolio.services.conversation_service import ConversationService
from devfolio.services.message_service import MessageService

router = APIRouter()


@router.get(
    "/conversations",
    response_model=DataResponse[List[ConversationResponse]],
    summary="List my conversations"
)
async def list_conversations(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """List the caller's conversations, most recent activity first."""
    conversations = await ConversationService(db).list_conversations(current_user.id)
    return DataResponse(data=conversations)


@router.get(
    "/conversation/{user_id}",
    response_model=DataResponse[ConversationResponse],
    summary="Get or start a conversation with a user"
)
async def get_or_create_conversation(
    user_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Return the conversation with ``user_id``, creating it on first contact.

    First contact is subject to the other user's message permission;
    blocks in either direction always deny.
    """
    conversation = await ConversationService(db).get_or_create(current_user.id, user_id)
    return DataResponse(data=conversation)


@router.get(
    "/conversation/{conversation_id}/messages",
    response_model=PaginatedResponse[MessageResponse],
    summary="Get conversation messages"
)
async def get_messages(
    conversation_id: str,
    paging: dict = Depends(get_pagination_params),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Page 1 holds the newest messages; each page is in chronological order."""
    messages, pagination = await MessageService(db).get_messages(
        conversation_id,
        current_user.id,
        page=paging["page"],
        limit=paging["limit"]
    )
    return PaginatedResponse(data=messages, pagination=pagination)


@router.post(
    "/conversation/{conversation_id}/messages",
    response_model=DataResponse[MessageResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Send a message"
)
@limiter.limit(settings.rate_limit_messages)
async def send_message(
    request: Request,
    conversation_id: str,
    message_data: MessageCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    message = await MessageService(db).send_message(
        conversation_id,
        current_user.id,
        message_data.content
    )
    return DataResponse(data=message)


@router.put(
    "/conversation/{conversation_id}/read",
    response_model=DataResponse[MarkReadResult],
    summary="Mark conversation as read"
)
async def mark_as_read(
    conversation_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    result = await MessageService(db).mark_as_read(conversation_id, current_user.id)
    return DataResponse(data=result)


@router.delete(
    "/conversation/{conversation_id}",
    response_model=DataResponse[ConversationDeleteResult],
    summary="Delete a conversation"
)
async def delete_conversation(
    conversation_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Delete the conversation and all of its messages for both participants."""
    result = await ConversationService(db).delete_conversation(conversation_id, current_user.id)
    return DataResponse(data=result)
