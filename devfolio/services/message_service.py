"""
Message service containing business logic for direct messages.
Handles sending, history pagination and read tracking.

Every write path here runs inside the request's single transaction
(committed by get_db), so a send either lands completely, with sequence
number, summary pointer and unread counter, or not at all.
"""
import logging
from typing import List, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from devfolio.config import settings
from devfolio.core.exceptions import PermissionDeniedError, ValidationError
from devfolio.repositories.conversation_repo import ConversationRepository
from devfolio.repositories.message_repo import MessageRepository
from devfolio.schemas.common import PaginationMeta
from devfolio.schemas.message import MarkReadResult, MessageResponse
from devfolio.services.conversation_service import ConversationService
from devfolio.services.permissions import check_send
from devfolio.utils.datetime_utils import utc_now

logger = logging.getLogger(__name__)


class MessageService:
    """Service for message operations with business logic."""

    def __init__(self, db: AsyncSession):
        """
        Initialize message service.

        Args:
            db: Database session
        """
        self.db = db
        self.message_repo = MessageRepository(db)
        self.conversation_repo = ConversationRepository(db)
        self.conversation_service = ConversationService(db)

    @staticmethod
    def _clean_content(content: str) -> str:
        """
        Trim and length-check message text.

        Raises:
            ValidationError: If the text is blank or too long
        """
        text = (content or "").strip()
        if not text:
            raise ValidationError("Message content is required")
        if len(text) > settings.message_max_length:
            raise ValidationError(
                f"Message cannot exceed {settings.message_max_length} characters"
            )
        return text

    async def send_message(
        self,
        conversation_id: str,
        sender_id: str,
        content: str
    ) -> MessageResponse:
        """
        Send a message into an existing conversation.

        The recipient's settings and both block edges are re-checked on
        every send.

        Args:
            conversation_id: Conversation ID
            sender_id: Sender user ID
            content: Message text, trimmed before storing

        Returns:
            The stored message

        Raises:
            ValidationError: If the content is blank or too long
            NotFoundError: If the conversation does not exist
            PermissionDeniedError: If the sender is not a participant or is denied
        """
        text = self._clean_content(content)

        conversation = await self.conversation_service.get_conversation_for_participant(
            conversation_id, sender_id
        )
        recipient_id = conversation.get_other_participant_id(sender_id)

        user_service = self.conversation_service.user_service
        sender = await user_service.get_social_snapshot(sender_id)
        recipient = await user_service.get_social_snapshot(recipient_id)

        try:
            check_send(sender, recipient)
        except PermissionDeniedError as e:
            logger.info(
                "Send %s -> %s in %s denied: %s",
                sender_id, recipient_id, conversation_id, e.message
            )
            raise

        sequence_number = await self.conversation_repo.next_sequence(conversation_id)
        message = await self.message_repo.create_with_sender_receipt(
            conversation_id=conversation_id,
            sender_id=sender_id,
            content=text,
            sequence_number=sequence_number,
        )
        await self.conversation_repo.set_last_message(
            conversation_id, message.id, message.created_at
        )
        await self.conversation_repo.increment_unread(conversation_id, recipient_id)

        logger.debug(
            "Message %s (#%d) sent in conversation %s",
            message.id, sequence_number, conversation_id
        )
        return MessageResponse.model_validate(message)

    async def get_messages(
        self,
        conversation_id: str,
        user_id: str,
        page: int = 1,
        limit: int = 50
    ) -> Tuple[List[MessageResponse], PaginationMeta]:
        """
        Get one page of a conversation's history in chronological order.

        Page 1 holds the newest ``limit`` messages.

        Raises:
            NotFoundError: If the conversation does not exist
            PermissionDeniedError: If the user is not a participant
        """
        await self.conversation_service.get_conversation_for_participant(
            conversation_id, user_id
        )

        messages, total = await self.message_repo.get_conversation_messages(
            conversation_id,
            limit=limit,
            offset=(page - 1) * limit
        )

        return (
            [MessageResponse.model_validate(m) for m in messages],
            PaginationMeta.build(page=page, limit=limit, total=total),
        )

    async def mark_as_read(self, conversation_id: str, user_id: str) -> MarkReadResult:
        """
        Mark every message the user has not read as read and zero their counter.

        Raises:
            NotFoundError: If the conversation does not exist
            PermissionDeniedError: If the user is not a participant
        """
        await self.conversation_service.get_conversation_for_participant(
            conversation_id, user_id
        )

        marked = await self.message_repo.mark_conversation_read(
            conversation_id, user_id, read_at=utc_now()
        )
        await self.conversation_repo.reset_unread(conversation_id, user_id)

        if marked:
            logger.debug(
                "User %s read %d messages in conversation %s",
                user_id, marked, conversation_id
            )

        return MarkReadResult(conversation_id=conversation_id, marked_count=marked)
