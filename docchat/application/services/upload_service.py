"""
Upload service orchestrator.

Implements the resumable upload protocol: ticket issuance, chunk append
and finalize. Finalize hands the document to the processing queue and
returns immediately.

Dependencies: docchat.core.upload_tokens, docchat.boundary.storage, docchat.boundary.db.CRUD
System role: Upload use case orchestration
"""

import logging
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from docchat.boundary.db.base import utc_now
from docchat.boundary.db.CRUD.document_crud import document_crud
from docchat.boundary.db.CRUD.message_crud import message_crud
from docchat.boundary.db.CRUD.session_crud import session_crud
from docchat.boundary.db.models.document_model import DocumentModel, DocumentStatus
from docchat.boundary.storage import UploadStorage
from docchat.configs import UploadSettings
from docchat.core.document_state import ensure_appendable, ensure_transition
from docchat.core.exceptions import (
    CapacityError,
    ConflictError,
    DocumentNotFoundError,
    SessionNotFoundError,
    UploadNotFoundError,
    ValidationError,
)
from docchat.core.upload_tokens import UploadTicket, UploadTokenSigner
from docchat.models.upload import (
    ChunkUploadResponse,
    CompleteUploadResponse,
    InitUploadRequest,
    InitUploadResponse,
)

if TYPE_CHECKING:
    from docchat.application.processing_queue import ProcessingQueue

logger = logging.getLogger(__name__)

UPLOAD_SESSION_TITLE = "Upload Session"
SIZE_EXCEEDED_MESSAGE = "max upload size exceeded"


class UploadService:
    """
    Upload service orchestrator.

    Every mutation after init is authorized by the signed ticket alone and
    scoped to the (document_id, session_id) pair it carries.
    """

    def __init__(
        self,
        db: AsyncSession,
        signer: UploadTokenSigner,
        storage: UploadStorage,
        settings: UploadSettings,
        queue: "ProcessingQueue | None" = None,
    ) -> None:
        """
        Initialize upload service.

        Args:
            db: Async SQLAlchemy session
            signer: Ticket signer
            storage: Temp and final file storage
            settings: Upload settings (size cap)
            queue: Background processing queue, None to leave documents in processing
        """
        self.db = db
        self.signer = signer
        self.storage = storage
        self.settings = settings
        self.queue = queue

    async def _load_document(self, ticket: UploadTicket) -> DocumentModel:
        document = await document_crud.get_in_session(
            self.db, ticket.document_id, ticket.session_id
        )
        if document is None:
            raise DocumentNotFoundError(str(ticket.document_id), str(ticket.session_id))
        return document

    async def _mark_failed(self, document: DocumentModel, message: str) -> None:
        ensure_transition(str(document.id), document.status, DocumentStatus.FAILED)
        document.status = DocumentStatus.FAILED
        document.error_message = message
        await self.db.commit()

    async def _fail_oversized(self, document: DocumentModel, size_bytes: int) -> CapacityError:
        await self._mark_failed(document, SIZE_EXCEEDED_MESSAGE)
        logger.warning(
            f"{__name__}:_fail_oversized - document_id={document.id} reached {size_bytes} bytes "
            f"(max {self.settings.max_bytes})"
        )
        return CapacityError(size_bytes, self.settings.max_bytes, str(document.id))

    async def init_upload(self, request: InitUploadRequest) -> InitUploadResponse:
        """
        Start an upload and make the new document the session's active one.

        The session's chat history is cleared right away, independent of
        when the new document finishes processing.

        Args:
            request: Init payload

        Returns:
            InitUploadResponse: Ticket and identifiers

        Raises:
            CapacityError: Declared size above the cap
            SessionNotFoundError: Given session_id does not exist
        """
        if request.size_bytes > self.settings.max_bytes:
            raise CapacityError(request.size_bytes, self.settings.max_bytes)

        if request.session_id is not None:
            session = await session_crud.get_by_id(self.db, request.session_id)
            if session is None:
                raise SessionNotFoundError(str(request.session_id))
        else:
            session = await session_crud.create(self.db, title=UPLOAD_SESSION_TITLE)

        document = await document_crud.create(
            self.db,
            session_id=session.id,
            title=request.title,
            status=DocumentStatus.PENDING,
            size_bytes=request.size_bytes,
            doc_metadata={
                **request.metadata,
                "filename": request.filename,
                "size_bytes": request.size_bytes,
            },
        )
        ensure_transition(str(document.id), document.status, DocumentStatus.UPLOADING)
        document.status = DocumentStatus.UPLOADING

        await session_crud.set_active_document(self.db, session.id, document.id)
        cleared = await message_crud.delete_by_session_id(self.db, session.id)
        await self.db.commit()

        token, ticket = self.signer.issue(document.id, session.id)
        logger.info(
            f"{__name__}:init_upload - document_id={document.id} session_id={session.id} "
            f"declared_bytes={request.size_bytes} cleared_messages={cleared}"
        )
        return InitUploadResponse(
            token=token,
            document_id=document.id,
            session_id=session.id,
            nonce=ticket.nonce,
            expires_at=ticket.expires_at,
            max_bytes=self.settings.max_bytes,
        )

    async def append_chunk(self, token: str, data: bytes) -> ChunkUploadResponse:
        """
        Append one byte range to the ticket's temp file.

        The document's size_bytes follows the temp file so status polling
        shows upload progress.

        Args:
            token: Upload ticket
            data: Raw bytes

        Returns:
            ChunkUploadResponse: Bytes received in this call and cumulative total

        Raises:
            AuthError: Ticket invalid or expired
            ValidationError: Empty chunk
            DocumentNotFoundError: Ticket document no longer exists
            ConflictError: Document already finalized or failed
            CapacityError: Cumulative size crossed the cap (document is marked failed)
        """
        ticket = self.signer.verify(token)
        if not data:
            raise ValidationError("Empty chunk", field="body")

        document = await self._load_document(ticket)
        ensure_appendable(str(document.id), document.status)

        total = await self.storage.append(ticket.document_id, ticket.nonce, data)
        document.size_bytes = total
        if total > self.settings.max_bytes:
            await self.storage.remove_temp(ticket.document_id, ticket.nonce)
            raise await self._fail_oversized(document, total)
        await self.db.commit()

        logger.debug(
            f"{__name__}:append_chunk - document_id={document.id} "
            f"received={len(data)} total={total}"
        )
        return ChunkUploadResponse(received_bytes=len(data), total_bytes=total)

    async def complete_upload(self, token: str, filename: str | None = None) -> CompleteUploadResponse:
        """
        Finalize an upload and queue it for processing.

        The document is claimed with a conditional uploading -> processing
        update before any file is moved, so of two concurrent finalize calls
        only the winner touches the upload; the other gets a conflict.

        Args:
            token: Upload ticket
            filename: Client filename (defaults to the one given at init)

        Returns:
            CompleteUploadResponse: Final size, status "processing"

        Raises:
            AuthError: Ticket invalid or expired
            DocumentNotFoundError: Ticket document no longer exists
            ConflictError: Document not in uploading state, or finalize lost the race
            UploadNotFoundError: No bytes were ever appended
            CapacityError: Final file above the cap (document is marked failed)
        """
        ticket = self.signer.verify(token)
        document = await self._load_document(ticket)
        ensure_transition(str(document.id), document.status, DocumentStatus.PROCESSING)

        temp_size = await self.storage.size(self.storage.temp_path(ticket.document_id, ticket.nonce))
        if not temp_size:
            logger.warning(f"{__name__}:complete_upload - No bytes for document_id={document.id}")
            raise UploadNotFoundError(str(document.id))

        # Step 1: Claim the document
        filename = filename or document.doc_metadata.get("filename")
        final_path = self.storage.final_path(ticket.document_id, filename)
        won = await document_crud.compare_and_set_status(
            self.db,
            document.id,
            DocumentStatus.UPLOADING,
            DocumentStatus.PROCESSING,
            file_path=str(final_path),
            size_bytes=temp_size,
            upload_completed_at=utc_now(),
            doc_metadata={**document.doc_metadata, "filename": filename, "size_bytes": temp_size},
        )
        if not won:
            await self.db.rollback()
            logger.warning(f"{__name__}:complete_upload - Lost finalize race for document_id={document.id}")
            raise ConflictError(
                "Upload already completed or processing",
                details={"document_id": str(document.id)},
            )
        await self.db.commit()
        await self.db.refresh(document)

        # Step 2: Promote the temp file
        try:
            final_path, size_bytes = await self.storage.promote(
                ticket.document_id, ticket.nonce, filename
            )
        except FileNotFoundError as e:
            await self._mark_failed(document, "Upload file disappeared before finalize")
            raise UploadNotFoundError(str(document.id)) from e

        if size_bytes > self.settings.max_bytes:
            await self.storage.remove(final_path)
            raise await self._fail_oversized(document, size_bytes)

        logger.info(
            f"{__name__}:complete_upload - document_id={document.id} size_bytes={size_bytes} "
            f"path={final_path}"
        )

        if self.queue is not None:
            self.queue.submit(document.id)

        return CompleteUploadResponse(document_id=document.id, size_bytes=size_bytes)

    async def get_document_status(self, document_id: UUID, session_id: UUID) -> DocumentModel:
        """
        Look up a document within its session (used for status polling).

        Raises:
            DocumentNotFoundError: If the document is not in that session
        """
        document = await document_crud.get_in_session(self.db, document_id, session_id)
        if document is None:
            raise DocumentNotFoundError(str(document_id), str(session_id))
        return document
