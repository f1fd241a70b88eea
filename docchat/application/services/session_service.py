"""
Session service orchestrator.

Coordinates session lifecycle operations: creation, detail lookup with
the active document and transcript, reset and retention cleanup.

Dependencies: docchat.boundary.db.CRUD, docchat.boundary.db.models
System role: Session use case orchestration
"""

import logging
from datetime import timedelta
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from docchat.boundary.db.base import utc_now
from docchat.boundary.db.CRUD.chunk_crud import chunk_crud
from docchat.boundary.db.CRUD.document_crud import document_crud
from docchat.boundary.db.CRUD.message_crud import message_crud
from docchat.boundary.db.CRUD.session_crud import session_crud
from docchat.boundary.db.models.session_model import SessionModel
from docchat.core.exceptions import SessionNotFoundError
from docchat.models.chat import MessageResponse
from docchat.models.document import DocumentResponse
from docchat.models.session import (
    CleanupResponse,
    ResetSessionResponse,
    SessionDetailResponse,
    SessionResponse,
)

logger = logging.getLogger(__name__)


class SessionService:
    """Session service orchestrator."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize session service with async database session.

        Args:
            db: Async SQLAlchemy session
        """
        self.db = db

    async def _require_session(self, session_id: UUID) -> SessionModel:
        session = await session_crud.get_by_id(self.db, session_id)
        if session is None:
            raise SessionNotFoundError(str(session_id))
        return session

    async def create_session(self, title: str = "Chat Session") -> SessionResponse:
        """
        Create a new, empty chat session.

        Args:
            title: Session title

        Returns:
            SessionResponse: Created session
        """
        session = await session_crud.create(self.db, title=title)
        await self.db.commit()
        logger.info(f"{__name__}:create_session - Created session_id={session.id}")
        return SessionResponse.model_validate(session)

    async def get_session(self, session_id: UUID) -> SessionDetailResponse:
        """
        Get a session with its active document and ordered transcript.

        Args:
            session_id: Session UUID

        Returns:
            SessionDetailResponse: Session, active document (or None) and messages

        Raises:
            SessionNotFoundError: If session does not exist
        """
        session = await self._require_session(session_id)

        active_document = None
        if session.active_document_id is not None:
            document = await document_crud.get_in_session(
                self.db, session.active_document_id, session_id
            )
            if document is not None:
                active_document = DocumentResponse.model_validate(document)

        messages = await message_crud.get_by_session_id(self.db, session_id)
        return SessionDetailResponse(
            session=SessionResponse.model_validate(session),
            active_document=active_document,
            messages=[MessageResponse.model_validate(m) for m in messages],
        )

    async def reset_session(self, session_id: UUID) -> tuple[ResetSessionResponse, list[UUID]]:
        """
        Delete every message, document and chunk of a session.

        The active pointer is cleared in the same transaction. File removal is
        left to the caller, which gets the deleted document ids back.

        Args:
            session_id: Session UUID

        Returns:
            (counts, deleted document ids)

        Raises:
            SessionNotFoundError: If session does not exist
        """
        await self._require_session(session_id)

        document_ids = await document_crud.get_ids_by_session(self.db, session_id)
        cleared_messages = await message_crud.delete_by_session_id(self.db, session_id)
        await chunk_crud.delete_by_document_ids(self.db, document_ids)
        cleared_documents = await document_crud.delete_many(self.db, document_ids)
        await session_crud.set_active_document(self.db, session_id, None)
        await self.db.commit()

        logger.info(
            f"{__name__}:reset_session - session_id={session_id} "
            f"messages={cleared_messages} documents={cleared_documents}"
        )
        response = ResetSessionResponse(
            session_id=session_id,
            cleared_messages=cleared_messages,
            cleared_documents=cleared_documents,
        )
        return response, document_ids

    async def cleanup_old_documents(
        self,
        session_id: UUID,
        older_than: timedelta,
    ) -> tuple[CleanupResponse, list[UUID]]:
        """
        Delete a session's documents created before now - older_than.

        Clears the active pointer when it referenced one of them.

        Args:
            session_id: Session UUID
            older_than: Retention window

        Returns:
            (counts, deleted document ids)

        Raises:
            SessionNotFoundError: If session does not exist
        """
        await self._require_session(session_id)

        cutoff = utc_now() - older_than
        document_ids = await document_crud.get_ids_older_than(self.db, session_id, cutoff)
        deleted_chunks = await chunk_crud.delete_by_document_ids(self.db, document_ids)
        deleted_documents = await document_crud.delete_many(self.db, document_ids)
        await session_crud.clear_active_if_in(self.db, session_id, document_ids)
        await self.db.commit()

        logger.info(
            f"{__name__}:cleanup_old_documents - session_id={session_id} "
            f"cutoff={cutoff.isoformat()} documents={deleted_documents} chunks={deleted_chunks}"
        )
        response = CleanupResponse(
            session_id=session_id,
            deleted_documents=deleted_documents,
            deleted_chunks=deleted_chunks,
        )
        return response, document_ids
