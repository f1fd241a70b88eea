"""
Message CRUD operations.

Transcript reads and the paired insert of one question/answer exchange.

Dependencies: sqlalchemy, docchat.boundary.db.models
System role: Chat transcript persistence operations
"""

from datetime import timedelta
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from docchat.boundary.db.base import utc_now
from docchat.boundary.db.CRUD.base_crud import BaseCRUD
from docchat.boundary.db.models.message_model import MessageModel, MessageRole


class MessageCRUD(BaseCRUD[MessageModel]):
    """CRUD operations for MessageModel."""

    def __init__(self) -> None:
        """Initialize MessageCRUD with MessageModel."""
        super().__init__(MessageModel)

    async def get_by_session_id(
        self,
        session: AsyncSession,
        session_id: UUID,
    ) -> Sequence[MessageModel]:
        """Retrieve a session's transcript in creation order."""
        stmt = (
            select(MessageModel)
            .where(MessageModel.session_id == session_id)
            .order_by(MessageModel.created_at, MessageModel.role.desc())
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def delete_by_session_id(self, session: AsyncSession, session_id: UUID) -> int:
        """
        Delete a session's transcript.

        Returns:
            Number of messages deleted
        """
        stmt = delete(MessageModel).where(MessageModel.session_id == session_id)
        result = await session.execute(stmt)
        return result.rowcount

    async def add_exchange(
        self,
        session: AsyncSession,
        session_id: UUID,
        document_id: UUID,
        question: str,
        answer: str,
        citations: list[dict[str, Any]],
    ) -> tuple[MessageModel, MessageModel]:
        """
        Insert a user question and the assistant answer as one ordered pair.

        The answer is stamped one microsecond after the question so the
        pair keeps its order even on clocks with coarse resolution.

        Args:
            session: Async database session
            session_id: Owning session
            document_id: Document that grounded the answer
            question: User turn text
            answer: Full assistant answer
            citations: Ranked retrieval results used in the prompt

        Returns:
            (user_message, assistant_message)
        """
        asked_at = utc_now()
        user_message = MessageModel(
            session_id=session_id,
            role=MessageRole.USER,
            content=question,
            document_id=document_id,
            message_metadata={},
            created_at=asked_at,
        )
        assistant_message = MessageModel(
            session_id=session_id,
            role=MessageRole.ASSISTANT,
            content=answer,
            document_id=document_id,
            citations=citations,
            message_metadata={},
            created_at=asked_at + timedelta(microseconds=1),
        )
        session.add_all([user_message, assistant_message])
        await session.flush()
        return user_message, assistant_message


message_crud = MessageCRUD()
