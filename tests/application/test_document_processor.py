"""
Test suite for background document processing.

System role: Verification of ready/failed transitions and active document swaps
"""

import uuid

import pytest

from docchat.application.processing_queue import ProcessingQueue
from docchat.application.services.document_processor import DocumentProcessor, describe_error
from docchat.boundary.db.CRUD.chunk_crud import chunk_crud
from docchat.boundary.db.CRUD.document_crud import document_crud
from docchat.boundary.db.CRUD.session_crud import session_crud
from docchat.boundary.db.models.document_model import DocumentStatus
from docchat.core.document_processing import DocumentPipeline
from docchat.core.embedding_gateway import EmbeddingGateway
from docchat.core.exceptions import ExtractionError, InvalidTransitionError


@pytest.fixture
def processor(session_factory, storage) -> DocumentProcessor:
    return DocumentProcessor(session_factory, DocumentPipeline(EmbeddingGateway(None, dim=8)), storage)


async def create_session(session_factory) -> uuid.UUID:
    async with session_factory() as s:
        session = await session_crud.create(s, title="Processing")
        await s.commit()
        return session.id


async def create_document(
    session_factory, storage, session_id, pdf: bytes | None, status=DocumentStatus.PROCESSING
):
    document_id = uuid.uuid4()
    path = storage.final_path(document_id, "notes.pdf")
    if pdf is not None:
        await storage.ensure_dirs()
        path.write_bytes(pdf)
    async with session_factory() as s:
        await document_crud.create(
            s,
            id=document_id,
            session_id=session_id,
            title="notes.pdf",
            status=status,
            file_path=str(path),
            doc_metadata={"filename": "notes.pdf"},
        )
        await s.commit()
    return document_id


async def load(session_factory, document_id):
    async with session_factory() as s:
        return await document_crud.get_by_id(s, document_id)


def test_describe_error() -> None:
    assert describe_error(ExtractionError("File not found: x.pdf")) == "File not found: x.pdf"
    assert describe_error(RuntimeError("boom")) == "RuntimeError: boom"


class TestProcess:
    """Successful processing."""

    async def test_process_should_mark_ready_and_activate(
        self, processor, session_factory, storage, sample_pdf
    ) -> None:
        session_id = await create_session(session_factory)
        document_id = await create_document(session_factory, storage, session_id, sample_pdf)

        result = await processor.process(document_id)

        document = await load(session_factory, document_id)
        assert document.status is DocumentStatus.READY
        assert document.error_message is None
        assert document.content.startswith("Page 1\n")
        assert document.doc_metadata["filename"] == "notes.pdf"
        assert document.doc_metadata["page_count"] == 2
        assert document.doc_metadata["chunk_count"] == result.chunk_count
        assert document.doc_metadata["used_fallback_embeddings"] is True
        async with session_factory() as s:
            session = await session_crud.get_by_id(s, session_id)
            assert session.active_document_id == document_id
            assert await chunk_crud.count_for_document(s, document_id) == result.chunk_count
            chunks = await chunk_crud.get_for_document_in_session(s, document_id, session_id)
        assert {chunk.chunk_metadata["source"] for chunk in chunks} == {document.file_path}
        assert result.page_count == 2
        assert result.superseded_document_ids == []

    async def test_second_document_should_replace_first(
        self, processor, session_factory, storage, sample_pdf
    ) -> None:
        session_id = await create_session(session_factory)
        first = await create_document(session_factory, storage, session_id, sample_pdf)
        await processor.process(first)
        second = await create_document(session_factory, storage, session_id, sample_pdf)

        result = await processor.process(second)

        assert result.superseded_document_ids == [first]
        assert await load(session_factory, first) is None
        async with session_factory() as s:
            assert await chunk_crud.count_for_document(s, first) == 0
            assert [d.id for d in await document_crud.get_by_session_id(s, session_id)] == [second]
        assert not list(storage.files_dir.glob(f"doc-{first}-*"))
        assert storage.final_path(second, "notes.pdf").exists()

    async def test_in_flight_upload_should_survive_swap(
        self, processor, session_factory, storage, sample_pdf
    ) -> None:
        session_id = await create_session(session_factory)
        uploading = await create_document(
            session_factory, storage, session_id, None, status=DocumentStatus.UPLOADING
        )
        finished = await create_document(session_factory, storage, session_id, sample_pdf)

        await processor.process(finished)

        assert (await load(session_factory, uploading)).status is DocumentStatus.UPLOADING

    async def test_process_should_require_processing_status(
        self, processor, session_factory, storage, sample_pdf
    ) -> None:
        session_id = await create_session(session_factory)
        document_id = await create_document(
            session_factory, storage, session_id, sample_pdf, status=DocumentStatus.UPLOADING
        )

        with pytest.raises(InvalidTransitionError):
            await processor.process(document_id)


class TestRun:
    """Failure handling for detached jobs."""

    async def test_missing_file_should_mark_failed(self, processor, session_factory, storage) -> None:
        session_id = await create_session(session_factory)
        document_id = await create_document(session_factory, storage, session_id, None)

        assert await processor.run(document_id) is None

        document = await load(session_factory, document_id)
        assert document.status is DocumentStatus.FAILED
        assert document.error_message.startswith("File not found")

    async def test_unreadable_pdf_should_mark_failed(self, processor, session_factory, storage) -> None:
        session_id = await create_session(session_factory)
        document_id = await create_document(session_factory, storage, session_id, b"not a pdf")

        await processor.run(document_id)

        assert (await load(session_factory, document_id)).status is DocumentStatus.FAILED

    async def test_ready_document_should_not_be_failed(
        self, processor, session_factory, storage, sample_pdf
    ) -> None:
        session_id = await create_session(session_factory)
        document_id = await create_document(session_factory, storage, session_id, sample_pdf)
        await processor.process(document_id)

        assert await processor.run(document_id) is None

        assert (await load(session_factory, document_id)).status is DocumentStatus.READY

    async def test_unknown_document_should_not_raise(self, processor) -> None:
        assert await processor.run(uuid.uuid4()) is None
        assert await processor.record_failure(uuid.uuid4(), "gone") is False


class TestProcessingQueue:
    """In-process job dispatch."""

    async def test_drain_should_wait_for_submitted_jobs(
        self, processor, session_factory, storage, sample_pdf
    ) -> None:
        session_id = await create_session(session_factory)
        document_id = await create_document(session_factory, storage, session_id, sample_pdf)
        queue = ProcessingQueue(processor)

        queue.submit(document_id)
        assert queue.pending == 1
        await queue.drain()

        assert queue.pending == 0
        assert (await load(session_factory, document_id)).status is DocumentStatus.READY
