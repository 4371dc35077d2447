"""
Conversation service containing business logic for direct conversations.
Handles lazy creation under the permission gate, listing and deletion.
"""
import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from devfolio.core.exceptions import (
    ConflictError,
    InternalError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from devfolio.models.conversation import Conversation
from devfolio.repositories.conversation_repo import ConversationRepository
from devfolio.schemas.conversation import (
    ConversationDeleteResult,
    ConversationResponse,
    LastMessageSummary,
)
from devfolio.schemas.user import UserSummary
from devfolio.services.permissions import check_new_conversation, check_not_blocked
from devfolio.services.user_service import UserService

logger = logging.getLogger(__name__)


class ConversationService:
    """Service for conversation operations with business logic."""

    def __init__(self, db: AsyncSession):
        """
        Initialize conversation service.

        Args:
            db: Database session
        """
        self.db = db
        self.conversation_repo = ConversationRepository(db)
        self.user_service = UserService(db)

    def _to_response(self, conversation: Conversation, user_id: str) -> ConversationResponse:
        """Shape a conversation from one participant's point of view."""
        other_id = conversation.get_other_participant_id(user_id)
        other = next(
            p.user for p in conversation.participants if p.user_id == other_id
        )

        last_message = None
        if conversation.last_message is not None:
            last_message = LastMessageSummary.model_validate(conversation.last_message)

        return ConversationResponse(
            id=conversation.id,
            participant=UserSummary.model_validate(other),
            last_message=last_message,
            last_message_at=conversation.last_message_at,
            unread_count=conversation.unread_counts[user_id],
            created_at=conversation.created_at,
            updated_at=conversation.updated_at,
        )

    async def get_conversation_for_participant(
        self,
        conversation_id: str,
        user_id: str
    ) -> Conversation:
        """
        Load a conversation the user takes part in.

        Raises:
            NotFoundError: If the conversation does not exist
            PermissionDeniedError: If the user is not a participant
        """
        conversation = await self.conversation_repo.get_with_participants(conversation_id)
        if not conversation:
            raise NotFoundError("Conversation not found")

        if not conversation.has_participant(user_id):
            raise PermissionDeniedError("Not authorized to access this conversation")

        return conversation

    async def get_or_create(self, user_id: str, other_user_id: str) -> ConversationResponse:
        """
        Get the conversation between two users, creating it on first contact.

        Block edges are checked on every call, so a block applies even
        when the conversation already exists. Only first contact consults
        the recipient's message permission.

        Args:
            user_id: Caller ID
            other_user_id: The other participant's ID

        Returns:
            Conversation from the caller's point of view

        Raises:
            ValidationError: If both IDs are the same
            NotFoundError: If either user does not exist
            PermissionDeniedError: If a block or the recipient's settings deny it
        """
        if user_id == other_user_id:
            raise ValidationError("Cannot create conversation with yourself")

        sender = await self.user_service.get_social_snapshot(user_id)
        recipient = await self.user_service.get_social_snapshot(other_user_id)

        check_not_blocked(sender, recipient)

        conversation = await self.conversation_repo.find_by_pair(user_id, other_user_id)
        if conversation:
            return self._to_response(conversation, user_id)

        try:
            check_new_conversation(sender, recipient, conversation_exists=False)
        except PermissionDeniedError as e:
            logger.info(
                "Conversation %s -> %s denied: %s", user_id, other_user_id, e.message
            )
            raise

        try:
            conversation = await self.conversation_repo.insert_if_absent(user_id, other_user_id)
            logger.info(
                "Created conversation %s between %s and %s",
                conversation.id, user_id, other_user_id
            )
        except ConflictError:
            # A concurrent request created the row between our lookup and insert
            conversation = await self.conversation_repo.find_by_pair(user_id, other_user_id)
            if conversation is None:
                raise InternalError("Conversation vanished after insert conflict")
            logger.info(
                "Recovered conversation %s after concurrent create", conversation.id
            )

        return self._to_response(conversation, user_id)

    async def list_conversations(self, user_id: str) -> List[ConversationResponse]:
        """
        Get every conversation the user takes part in, most recent activity first.
        """
        conversations = await self.conversation_repo.list_for_user(user_id)
        return [self._to_response(c, user_id) for c in conversations]

    async def delete_conversation(
        self,
        conversation_id: str,
        user_id: str
    ) -> ConversationDeleteResult:
        """
        Delete a conversation with all of its messages and receipts.

        Raises:
            NotFoundError: If the conversation does not exist
            PermissionDeniedError: If the user is not a participant
        """
        await self.get_conversation_for_participant(conversation_id, user_id)

        removed = await self.conversation_repo.delete_cascade(conversation_id)
        logger.info(
            "Conversation %s deleted by %s (%d messages removed)",
            conversation_id, user_id, removed
        )

        return ConversationDeleteResult(
            conversation_id=conversation_id,
            messages_deleted=removed
        )
