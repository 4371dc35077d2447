"""
Message repository for database operations.
Handles message inserts, history pagination and read receipts.
"""
from datetime import datetime
from typing import List, Tuple

from sqlalchemy import select, and_, desc, exists, insert
from sqlalchemy.ext.asyncio import AsyncSession

from devfolio.models.message import Message, MessageReceipt
from devfolio.repositories.base import BaseRepository
from devfolio.utils.datetime_utils import utc_now


class MessageRepository(BaseRepository[Message]):
    """Repository for message database operations."""

    def __init__(self, db: AsyncSession):
        """Initialize message repository."""
        super().__init__(Message, db)

    async def create_with_sender_receipt(
        self,
        conversation_id: str,
        sender_id: str,
        content: str,
        sequence_number: int
    ) -> Message:
        """
        Insert a message that is already read by its sender.

        Args:
            conversation_id: Conversation ID
            sender_id: Sender user ID
            content: Trimmed message text
            sequence_number: Reserved sequence number

        Returns:
            Created message with sender and receipts loaded
        """
        now = utc_now()
        message = Message(
            conversation_id=conversation_id,
            sender_id=sender_id,
            content=content,
            sequence_number=sequence_number,
            created_at=now,
            receipts=[MessageReceipt(user_id=sender_id, read_at=now)],
        )
        self.db.add(message)
        await self.db.flush()
        await self.db.refresh(message, attribute_names=["sender", "receipts"])
        return message

    async def get_conversation_messages(
        self,
        conversation_id: str,
        limit: int = 50,
        offset: int = 0,
        include_deleted: bool = False
    ) -> Tuple[List[Message], int]:
        """
        Get one page of a conversation's history.

        Messages are selected newest-first and returned in chronological
        order.

        Args:
            conversation_id: Conversation ID
            limit: Page size
            offset: Number of newest messages to skip
            include_deleted: Include soft-deleted messages

        Returns:
            Tuple of (messages oldest-first, total matching messages)
        """
        filters = {"conversation_id": conversation_id}
        if not include_deleted:
            filters["deleted"] = False
        conditions = [getattr(Message, key) == value for key, value in filters.items()]

        result = await self.db.execute(
            select(Message)
            .where(and_(*conditions))
            .order_by(desc(Message.sequence_number))
            .limit(limit)
            .offset(offset)
            .execution_options(populate_existing=True)
        )
        messages = list(result.scalars().all())
        messages.reverse()

        return messages, await self.count(**filters)

    async def mark_conversation_read(
        self,
        conversation_id: str,
        user_id: str,
        read_at: datetime | None = None
    ) -> int:
        """
        Add a read receipt for ``user_id`` to every unread message they did not send.

        Args:
            conversation_id: Conversation ID
            user_id: Reader user ID
            read_at: Receipt timestamp (defaults to now)

        Returns:
            Number of messages newly marked as read
        """
        already_read = exists().where(
            and_(
                MessageReceipt.message_id == Message.id,
                MessageReceipt.user_id == user_id
            )
        )
        result = await self.db.execute(
            select(Message.id).where(
                and_(
                    Message.conversation_id == conversation_id,
                    Message.sender_id != user_id,
                    ~already_read
                )
            )
        )
        unread_ids = list(result.scalars().all())
        if not unread_ids:
            return 0

        stamp = read_at or utc_now()
        await self.db.execute(
            insert(MessageReceipt.__table__),
            [{"message_id": message_id, "user_id": user_id, "read_at": stamp} for message_id in unread_ids]
        )
        await self.db.flush()
        return len(unread_ids)
