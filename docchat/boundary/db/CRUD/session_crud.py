"""
Session CRUD operations.

Provides Create, Read, Update, Delete operations for SessionModel
plus the active document pointer updates.

Dependencies: sqlalchemy, docchat.boundary.db.models
System role: Session persistence operations
"""

from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from docchat.boundary.db.base import utc_now
from docchat.boundary.db.CRUD.base_crud import BaseCRUD
from docchat.boundary.db.models.session_model import SessionModel


class SessionCRUD(BaseCRUD[SessionModel]):
    """CRUD operations for SessionModel."""

    def __init__(self) -> None:
        """Initialize SessionCRUD with SessionModel."""
        super().__init__(SessionModel)

    async def get_for_update(self, session: AsyncSession, id: UUID) -> SessionModel | None:
        """
        Load a session row and lock it for the rest of the transaction.

        The row lock serializes pointer swaps for one session on PostgreSQL;
        SQLite ignores FOR UPDATE and relies on its database-level write lock.

        Args:
            session: Async database session
            id: Session UUID

        Returns:
            SessionModel if found, None otherwise
        """
        stmt = select(SessionModel).where(SessionModel.id == id).with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def set_active_document(
        self,
        session: AsyncSession,
        id: UUID,
        document_id: UUID | None,
    ) -> None:
        """
        Point the session at a document (or clear the pointer with None).

        Args:
            session: Async database session
            id: Session UUID
            document_id: New active document, None to clear
        """
        stmt = (
            update(SessionModel)
            .where(SessionModel.id == id)
            .values(active_document_id=document_id, updated_at=utc_now())
        )
        await session.execute(stmt)

    async def clear_active_if_in(
        self,
        session: AsyncSession,
        id: UUID,
        document_ids: list[UUID],
    ) -> bool:
        """
        Clear the pointer only when it references one of document_ids.

        Returns:
            True if the pointer was cleared
        """
        if not document_ids:
            return False
        stmt = (
            update(SessionModel)
            .where(
                SessionModel.id == id,
                SessionModel.active_document_id.in_(document_ids),
            )
            .values(active_document_id=None, updated_at=utc_now())
        )
        result = await session.execute(stmt)
        return result.rowcount > 0


session_crud = SessionCRUD()
