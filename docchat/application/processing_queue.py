"""
In-process processing queue.

Spawns one asyncio task per finalized document. Tasks run
DocumentProcessor.run, which records failures on the document itself,
so a queued job never raises into the event loop.

Dependencies: asyncio, docchat.application.services.document_processor
System role: Background job dispatch for finalized uploads
"""

import asyncio
import logging
from uuid import UUID

from docchat.application.services.document_processor import DocumentProcessor

logger = logging.getLogger(__name__)


class ProcessingQueue:
    """Detached document processing with a drain hook for shutdown and tests."""

    def __init__(self, processor: DocumentProcessor) -> None:
        self.processor = processor
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        """Number of jobs not finished yet."""
        return len(self._tasks)

    def submit(self, document_id: UUID) -> asyncio.Task:
        """
        Schedule processing of a document on the running loop.

        Args:
            document_id: Document in processing state

        Returns:
            asyncio.Task: The scheduled job
        """
        task = asyncio.create_task(
            self.processor.run(document_id),
            name=f"process-document-{document_id}",
        )
        # Hold a reference until done so the task is not garbage collected
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        logger.info(f"{__name__}:submit - Queued document_id={document_id} pending={self.pending}")
        return task

    async def drain(self) -> None:
        """Wait for every submitted job to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
