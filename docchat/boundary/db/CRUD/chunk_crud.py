"""
Chunk CRUD operations.

Bulk replacement and session-scoped reads of embedded chunks.

Dependencies: sqlalchemy, docchat.boundary.db.models
System role: Chunk persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from docchat.boundary.db.CRUD.base_crud import BaseCRUD
from docchat.boundary.db.models.chunk_model import ChunkModel
from docchat.boundary.db.models.document_model import DocumentModel


class ChunkCRUD(BaseCRUD[ChunkModel]):
    """CRUD operations for ChunkModel."""

    def __init__(self) -> None:
        """Initialize ChunkCRUD with ChunkModel."""
        super().__init__(ChunkModel)

    async def delete_by_document_ids(
        self,
        session: AsyncSession,
        document_ids: Sequence[UUID],
    ) -> int:
        """
        Delete all chunks of the given documents.

        Returns:
            Number of chunks deleted
        """
        if not document_ids:
            return 0
        stmt = delete(ChunkModel).where(ChunkModel.document_id.in_(list(document_ids)))
        result = await session.execute(stmt)
        return result.rowcount

    async def get_for_document_in_session(
        self,
        session: AsyncSession,
        document_id: UUID,
        session_id: UUID,
    ) -> Sequence[ChunkModel]:
        """
        Retrieve a document's chunks in storage order, scoped to its session.

        The join on documents keeps a mismatched (document, session) pair
        from returning anything.

        Args:
            session: Async database session
            document_id: Document UUID
            session_id: Session UUID that must own the document

        Returns:
            Chunks ordered by chunk_index
        """
        stmt = (
            select(ChunkModel)
            .join(DocumentModel, DocumentModel.id == ChunkModel.document_id)
            .where(
                ChunkModel.document_id == document_id,
                DocumentModel.session_id == session_id,
            )
            .order_by(ChunkModel.chunk_index)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def count_for_document(self, session: AsyncSession, document_id: UUID) -> int:
        """Number of chunks stored for a document."""
        stmt = select(func.count()).select_from(ChunkModel).where(
            ChunkModel.document_id == document_id
        )
        result = await session.execute(stmt)
        return int(result.scalar_one())


chunk_crud = ChunkCRUD()
