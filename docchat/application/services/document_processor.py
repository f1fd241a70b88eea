"""
Document processor.

Runs the ingestion pipeline for one finalized document and writes the
outcome back through the document state machine: on success the chunk
replacement, status change and active pointer swap happen in a single
transaction; on failure the error is recorded on the document row.

Used by both the in-process processing queue and the worker CLI, so
failures are handled the same way whoever triggers processing.

Dependencies: docchat.core.document_processing, docchat.boundary.db.CRUD, docchat.boundary.storage
System role: Background processing use case
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from docchat.boundary.db.CRUD.chunk_crud import chunk_crud
from docchat.boundary.db.CRUD.document_crud import document_crud
from docchat.boundary.db.CRUD.session_crud import session_crud
from docchat.boundary.db.models.document_model import DocumentStatus
from docchat.boundary.storage import UploadStorage
from docchat.core.document_processing import DocumentPipeline, PipelineResult, ProcessedDocument
from docchat.core.document_state import can_transition, ensure_transition
from docchat.core.exceptions import (
    DocChatException,
    DocumentNotFoundError,
    ExtractionError,
    InvalidTransitionError,
)

logger = logging.getLogger(__name__)


def describe_error(error: Exception) -> str:
    """Message recorded on a failed document."""
    if isinstance(error, DocChatException):
        return error.message
    return f"{type(error).__name__}: {error}"


class DocumentProcessor:
    """
    Process documents that are in the processing state.

    Each step opens its own database session from the factory, since
    processing outlives the request that finalized the upload.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        pipeline: DocumentPipeline,
        storage: UploadStorage | None = None,
    ) -> None:
        """
        Initialize document processor.

        Args:
            session_factory: Factory for independent database sessions
            pipeline: Parse -> chunk -> embed pipeline
            storage: Used to remove files of superseded documents (optional)
        """
        self.session_factory = session_factory
        self.pipeline = pipeline
        self.storage = storage

    async def process(self, document_id: UUID) -> PipelineResult:
        """
        Process one document and make it the session's active document.

        Args:
            document_id: Document in processing state

        Returns:
            PipelineResult: Summary of the stored result

        Raises:
            DocumentNotFoundError: Document no longer exists
            InvalidTransitionError: Document is not in processing state
            ExtractionError: File missing or unreadable
        """
        logger.info(f"{__name__}:process - START document_id={document_id}")

        async with self.session_factory() as db:
            document = await document_crud.get_by_id(db, document_id)
            if document is None:
                raise DocumentNotFoundError(str(document_id))
            if document.status != DocumentStatus.PROCESSING:
                raise InvalidTransitionError(
                    str(document_id), document.status.value, DocumentStatus.READY.value
                )
            file_path = document.file_path

        if not file_path:
            raise ExtractionError("Document has no finalized file", str(document_id))
        processed = await self.pipeline.process(file_path)
        result = await self._complete(document_id, processed, file_path)

        if self.storage is not None and result.superseded_document_ids:
            await self.storage.remove_document_files(result.superseded_document_ids)

        logger.info(
            f"{__name__}:process - DONE document_id={document_id} chunks={result.chunk_count} "
            f"superseded={len(result.superseded_document_ids)}"
        )
        return result

    async def _complete(
        self, document_id: UUID, processed: ProcessedDocument, file_path: str
    ) -> PipelineResult:
        """
        Store chunks, mark ready and swap the active pointer in one transaction.

        The session row is locked before the document row so two completions
        in the same session serialize. Whatever document was active before,
        plus any other finished document of the session, is deleted together
        with its chunks.
        """
        async with self.session_factory() as db:
            document = await document_crud.get_by_id(db, document_id)
            if document is None:
                raise DocumentNotFoundError(str(document_id))
            session_id = document.session_id

            session = await session_crud.get_for_update(db, session_id)
            document = await document_crud.get_for_update(db, document_id)
            if session is None or document is None:
                raise DocumentNotFoundError(str(document_id), str(session_id))
            ensure_transition(str(document_id), document.status, DocumentStatus.READY)

            # Step 1: Replace chunks
            await chunk_crud.delete_by_document_ids(db, [document_id])
            await chunk_crud.create_many(
                db,
                [
                    {
                        "document_id": document_id,
                        "content": chunk.content,
                        "embedding": chunk.embedding,
                        "chunk_index": chunk.chunk_index,
                        "page_start": chunk.page_start,
                        "page_end": chunk.page_end,
                        "chunk_metadata": {"source": file_path},
                    }
                    for chunk in processed.chunks
                ],
            )

            # Step 2: Mark ready
            document.status = DocumentStatus.READY
            document.content = processed.full_text
            document.error_message = None
            document.doc_metadata = {
                **(document.doc_metadata or {}),
                "page_count": len(processed.pages),
                "chunk_count": len(processed.chunks),
                "used_fallback_embeddings": processed.used_fallback_embeddings,
            }

            # Step 3: Supersede and swap pointer
            superseded = await document_crud.get_superseded(
                db, session_id, document_id, session.active_document_id
            )
            await chunk_crud.delete_by_document_ids(db, superseded)
            await document_crud.delete_many(db, superseded)
            await session_crud.set_active_document(db, session_id, document_id)

            await db.commit()

        return PipelineResult(
            document_id=document_id,
            chunk_count=len(processed.chunks),
            page_count=len(processed.pages),
            superseded_document_ids=superseded,
            used_fallback_embeddings=processed.used_fallback_embeddings,
            processing_time_ms=processed.processing_time_ms,
        )

    async def record_failure(self, document_id: UUID, message: str) -> bool:
        """
        Move a document to failed and store the error message.

        Args:
            document_id: Document that failed
            message: Error description

        Returns:
            True if the failure was recorded, False if the document is gone
            or can no longer move to failed
        """
        async with self.session_factory() as db:
            document = await document_crud.get_for_update(db, document_id)
            if document is None:
                logger.warning(f"{__name__}:record_failure - document_id={document_id} not found")
                return False
            if not can_transition(document.status, DocumentStatus.FAILED):
                logger.warning(
                    f"{__name__}:record_failure - document_id={document_id} is "
                    f"{document.status.value}, not marking failed"
                )
                return False

            document.status = DocumentStatus.FAILED
            document.error_message = message
            await db.commit()

        logger.info(f"{__name__}:record_failure - document_id={document_id} marked failed: {message}")
        return True

    async def run(self, document_id: UUID) -> PipelineResult | None:
        """
        Process a document, recording any failure on the document row.

        Never raises; the caller is a detached task with nobody to report to.

        Returns:
            PipelineResult on success, None on failure
        """
        try:
            return await self.process(document_id)
        except Exception as e:
            logger.error(
                f"{__name__}:run - Processing failed for document_id={document_id}: "
                f"{type(e).__name__}: {e}"
            )
            error = e

        try:
            await self.record_failure(document_id, describe_error(error))
        except Exception:
            logger.exception(f"{__name__}:run - Could not record failure for document_id={document_id}")
        return None
