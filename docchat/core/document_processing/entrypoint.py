"""
Document pipeline orchestrator.

Coordinates parsing, chunking and embedding for one finalized file.
Persistence is left to the caller so the whole result can be written in
a single transaction.

Dependencies: All task modules, docchat.core.embedding_gateway
System role: Pipeline orchestration (coordinates only)
"""

import logging
import time
from pathlib import Path

from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel

from docchat.configs import IngestionSettings
from docchat.core.embedding_gateway import EmbeddingGateway

from .models import Chunk, PageText
from .tasks import ChunkingTask, ParsingTask

logger = logging.getLogger(__name__)


class ProcessedDocument(BaseModel):
    """Everything needed to mark a document ready."""

    pages: list[PageText]
    chunks: list[Chunk]
    full_text: str
    used_fallback_embeddings: bool
    processing_time_ms: float


def build_full_text(pages: list[PageText]) -> str:
    """Document text as "Page {n}" blocks separated by blank lines."""
    return "\n\n".join(f"Page {page.page_number}\n{page.text}" for page in pages)


class DocumentPipeline:
    """Orchestrate document ingestion: parse -> chunk -> embed."""

    def __init__(
        self,
        embedding_gateway: EmbeddingGateway,
        settings: IngestionSettings | None = None,
    ) -> None:
        """
        Initialize pipeline with configuration.

        Args:
            embedding_gateway: Gateway used to embed chunk texts
            settings: Ingestion settings (uses defaults if None)
        """
        self._settings = settings or IngestionSettings()
        self._parsing_task = ParsingTask(row_tolerance=self._settings.row_tolerance)
        self._chunking_task = ChunkingTask(
            max_chars=self._settings.chunk_max_chars,
            min_chars=self._settings.chunk_min_chars,
        )
        self._embedding_gateway = embedding_gateway

    async def process(self, file_path: str | Path) -> ProcessedDocument:
        """
        Process a document file through the full pipeline.

        Args:
            file_path: Finalized upload on disk

        Returns:
            ProcessedDocument: Pages, embedded chunks and full text

        Raises:
            ExtractionError: File missing or not a readable PDF
        """
        start_time = time.perf_counter()
        logger.info(f"{__name__}:process - START file_path={file_path}")

        # Step 1: Parse (CPU bound, off the event loop)
        pages = await run_in_threadpool(self._parsing_task.parse, file_path)

        # Step 2: Chunk
        chunks = self._chunking_task.chunk(pages)
        logger.info(f"{__name__}:process - Chunked {len(pages)} pages into {len(chunks)} chunks")

        # Step 3: Embed
        batch = await self._embedding_gateway.embed_batch([chunk.content for chunk in chunks])
        embedded = [
            chunk.model_copy(update={"embedding": vector})
            for chunk, vector in zip(chunks, batch.vectors)
        ]

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            f"{__name__}:process - DONE chunks={len(embedded)} "
            f"fallback={batch.used_fallback} elapsed_ms={elapsed_ms:.1f}"
        )
        return ProcessedDocument(
            pages=pages,
            chunks=embedded,
            full_text=build_full_text(pages),
            used_fallback_embeddings=batch.used_fallback,
            processing_time_ms=elapsed_ms,
        )
