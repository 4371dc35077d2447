"""
Conversation repository for database operations.
Handles conversations, participants, unread counters and cascade deletes.
"""
from datetime import datetime
from typing import Optional, List

from sqlalchemy import select, and_, desc, delete, update
from sqlalchemy.ext.asyncio import AsyncSession

from devfolio.core.exceptions import ConflictError
from devfolio.models.base import generate_uuid
from devfolio.models.conversation import Conversation, ConversationParticipant, participant_pair
from devfolio.models.message import Message, MessageReceipt
from devfolio.repositories.base import BaseRepository
from devfolio.utils.datetime_utils import utc_now


class ConversationRepository(BaseRepository[Conversation]):
    """Repository for conversation database operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(Conversation, db)

    async def get_with_participants(self, conversation_id: str) -> Optional[Conversation]:
        """
        Get conversation with participants and last message loaded.

        Always re-reads from the database so counters updated with bulk
        statements are reflected on the returned instance.

        Args:
            conversation_id: Conversation ID

        Returns:
            Conversation or None
        """
        result = await self.db.execute(
            select(Conversation)
            .where(Conversation.id == conversation_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def find_by_pair(self, user_a_id: str, user_b_id: str) -> Optional[Conversation]:
        """
        Find the conversation between two users, regardless of argument order.

        Args:
            user_a_id: First user ID
            user_b_id: Second user ID

        Returns:
            Conversation or None
        """
        low, high = participant_pair(user_a_id, user_b_id)
        result = await self.db.execute(
            select(Conversation)
            .where(
                and_(
                    Conversation.participant_low_id == low,
                    Conversation.participant_high_id == high
                )
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def insert_if_absent(self, user_a_id: str, user_b_id: str) -> Conversation:
        """
        Create the conversation for a pair unless one already exists.

        Uses ``INSERT ... ON CONFLICT DO NOTHING`` on the pair constraint so
        concurrent first-contact requests cannot produce two rows. Both
        participants start with an unread counter of zero.

        Args:
            user_a_id: First user ID
            user_b_id: Second user ID

        Returns:
            The newly created conversation

        Raises:
            ConflictError: If a conversation for the pair already exists
        """
        insert = self.conflict_insert()
        low, high = participant_pair(user_a_id, user_b_id)
        now = utc_now()
        table = Conversation.__table__

        stmt = (
            insert(table)
            .values(
                id=generate_uuid(),
                participant_low_id=low,
                participant_high_id=high,
                last_message_at=now,
                last_sequence=0,
                created_at=now,
                updated_at=now,
            )
            .on_conflict_do_nothing(index_elements=["participant_low_id", "participant_high_id"])
            .returning(table.c.id)
        )
        result = await self.db.execute(stmt)
        conversation_id = result.scalar_one_or_none()

        if conversation_id is None:
            raise ConflictError("Conversation already exists for this pair")

        self.db.add_all([
            ConversationParticipant(conversation_id=conversation_id, user_id=low, unread_count=0),
            ConversationParticipant(conversation_id=conversation_id, user_id=high, unread_count=0),
        ])
        await self.db.flush()

        return await self.get_with_participants(conversation_id)

    async def list_for_user(self, user_id: str) -> List[Conversation]:
        """
        Get every conversation a user participates in.

        Ordered by most recent activity first.
        """
        result = await self.db.execute(
            select(Conversation)
            .join(
                ConversationParticipant,
                ConversationParticipant.conversation_id == Conversation.id
            )
            .where(ConversationParticipant.user_id == user_id)
            .order_by(desc(Conversation.last_message_at), desc(Conversation.created_at))
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def next_sequence(self, conversation_id: str) -> int:
        """
        Atomically reserve the next message sequence number.

        The UPDATE takes the conversation row lock, which serializes
        concurrent sends into the same conversation until commit.
        """
        result = await self.db.execute(
            update(Conversation.__table__)
            .where(Conversation.__table__.c.id == conversation_id)
            .values(last_sequence=Conversation.__table__.c.last_sequence + 1)
            .returning(Conversation.__table__.c.last_sequence)
        )
        return result.scalar_one()

    async def set_last_message(
        self,
        conversation_id: str,
        message_id: str,
        message_at: datetime
    ) -> None:
        """Point the conversation summary at its newest message."""
        await self.db.execute(
            update(Conversation.__table__)
            .where(Conversation.__table__.c.id == conversation_id)
            .values(last_message_id=message_id, last_message_at=message_at, updated_at=utc_now())
        )

    async def increment_unread(self, conversation_id: str, user_id: str, amount: int = 1) -> None:
        """Add ``amount`` to a participant's unread counter."""
        table = ConversationParticipant.__table__
        await self.db.execute(
            update(table)
            .where(
                and_(
                    table.c.conversation_id == conversation_id,
                    table.c.user_id == user_id
                )
            )
            .values(unread_count=table.c.unread_count + amount)
        )

    async def reset_unread(self, conversation_id: str, user_id: str) -> None:
        """Set a participant's unread counter to zero."""
        table = ConversationParticipant.__table__
        await self.db.execute(
            update(table)
            .where(
                and_(
                    table.c.conversation_id == conversation_id,
                    table.c.user_id == user_id
                )
            )
            .values(unread_count=0)
        )

    async def delete_cascade(self, conversation_id: str) -> int:
        """
        Delete a conversation together with its messages and receipts.

        Args:
            conversation_id: Conversation ID

        Returns:
            Number of messages removed
        """
        message_ids = select(Message.__table__.c.id).where(
            Message.__table__.c.conversation_id == conversation_id
        )

        await self.db.execute(
            update(Conversation.__table__)
            .where(Conversation.__table__.c.id == conversation_id)
            .values(last_message_id=None)
        )
        await self.db.execute(
            delete(MessageReceipt.__table__).where(
                MessageReceipt.__table__.c.message_id.in_(message_ids)
            )
        )
        result = await self.db.execute(
            delete(Message.__table__).where(Message.__table__.c.conversation_id == conversation_id)
        )
        removed = result.rowcount
        await self.db.execute(
            delete(ConversationParticipant.__table__).where(
                ConversationParticipant.__table__.c.conversation_id == conversation_id
            )
        )
        await self.db.execute(
            delete(Conversation.__table__).where(Conversation.__table__.c.id == conversation_id)
        )
        await self.db.flush()
        return removed
