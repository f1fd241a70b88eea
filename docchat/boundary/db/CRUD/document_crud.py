"""
Document CRUD operations.

Provides Create, Read, Update, Delete operations for DocumentModel
with session-scoped lookups and compare-and-swap status updates.

Dependencies: sqlalchemy, docchat.boundary.db.models
System role: Document persistence operations
"""

from datetime import datetime
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from docchat.boundary.db.base import utc_now
from docchat.boundary.db.CRUD.base_crud import BaseCRUD
from docchat.boundary.db.models.document_model import DocumentModel, DocumentStatus


class DocumentCRUD(BaseCRUD[DocumentModel]):
    """
    CRUD operations for DocumentModel.

    Extends BaseCRUD with queries scoped by (document_id, session_id) so a
    ticket or request can never reach another session's document.
    """

    def __init__(self) -> None:
        """Initialize DocumentCRUD with DocumentModel."""
        super().__init__(DocumentModel)

    async def get_in_session(
        self,
        session: AsyncSession,
        id: UUID,
        session_id: UUID,
    ) -> DocumentModel | None:
        """
        Retrieve a document only if it belongs to session_id.

        Args:
            session: Async database session
            id: Document UUID
            session_id: Owning session UUID

        Returns:
            DocumentModel if found in that session, None otherwise
        """
        stmt = select(DocumentModel).where(
            DocumentModel.id == id,
            DocumentModel.session_id == session_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_for_update(self, session: AsyncSession, id: UUID) -> DocumentModel | None:
        """Load a document row and lock it for the rest of the transaction."""
        stmt = select(DocumentModel).where(DocumentModel.id == id).with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_session_id(
        self,
        session: AsyncSession,
        session_id: UUID,
    ) -> Sequence[DocumentModel]:
        """Retrieve all documents for a session, oldest first."""
        stmt = (
            select(DocumentModel)
            .where(DocumentModel.session_id == session_id)
            .order_by(DocumentModel.created_at)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_oldest_by_status(
        self,
        session: AsyncSession,
        status: DocumentStatus,
    ) -> DocumentModel | None:
        """
        Retrieve the oldest document in a given status.

        Args:
            session: Async database session
            status: Status to filter by

        Returns:
            Oldest matching DocumentModel, None if there is none
        """
        stmt = (
            select(DocumentModel)
            .where(DocumentModel.status == status)
            .order_by(DocumentModel.created_at)
            .limit(1)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_superseded(
        self,
        session: AsyncSession,
        session_id: UUID,
        keep_id: UUID,
        previous_active_id: UUID | None,
    ) -> list[UUID]:
        """
        Ids of documents replaced when keep_id becomes the active document.

        That is the previously active document (whatever its status) plus
        every other finished (READY or FAILED) document of the session.
        In-flight uploads that are not the active document are left alone.

        Args:
            session: Async database session
            session_id: Session UUID
            keep_id: Document that just finished processing
            previous_active_id: Session pointer value before the swap

        Returns:
            Document ids to delete
        """
        conditions = [DocumentModel.status.in_([DocumentStatus.READY, DocumentStatus.FAILED])]
        if previous_active_id is not None:
            conditions.append(DocumentModel.id == previous_active_id)

        stmt = select(DocumentModel.id).where(
            DocumentModel.session_id == session_id,
            DocumentModel.id != keep_id,
            or_(*conditions),
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def get_ids_older_than(
        self,
        session: AsyncSession,
        session_id: UUID,
        cutoff: datetime,
    ) -> list[UUID]:
        """Ids of the session's documents created before cutoff."""
        stmt = select(DocumentModel.id).where(
            DocumentModel.session_id == session_id,
            DocumentModel.created_at < cutoff,
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def get_ids_by_session(self, session: AsyncSession, session_id: UUID) -> list[UUID]:
        """Ids of every document in a session."""
        stmt = select(DocumentModel.id).where(DocumentModel.session_id == session_id)
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def compare_and_set_status(
        self,
        session: AsyncSession,
        id: UUID,
        expected: DocumentStatus,
        new: DocumentStatus,
        **fields: Any,
    ) -> bool:
        """
        Move a document from expected to new status in one conditional UPDATE.

        Only one of several concurrent callers can win the swap.

        Args:
            session: Async database session
            id: Document UUID
            expected: Status the row must currently have
            new: Status to write
            **fields: Extra columns to update alongside the status

        Returns:
            True if this caller performed the transition
        """
        stmt = (
            update(DocumentModel)
            .where(DocumentModel.id == id, DocumentModel.status == expected)
            .values(status=new, updated_at=utc_now(), **fields)
            .execution_options(synchronize_session="fetch")
        )
        result = await session.execute(stmt)
        return result.rowcount > 0


document_crud = DocumentCRUD()
