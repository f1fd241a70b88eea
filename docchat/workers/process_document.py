"""
Document processing worker CLI.

Processes one document in the processing state, outside the API process.

Usage:
    python -m docchat.workers.process_document [DOCUMENT_ID]

The document id comes from the first argument or the DOC_ID environment
variable; without either, the oldest document still in processing is
picked. Exit code 0 on success, 1 on failure.

Dependencies: python-dotenv, docchat.application.services.document_processor
System role: Worker entry point for background ingestion
"""

import asyncio
import logging
import os
import sys
import uuid

from dotenv import load_dotenv

# Load environment variables from .env if present
load_dotenv()

from docchat.api.deps.dependencies import ServiceCache
from docchat.boundary.db import init_models
from docchat.boundary.db.CRUD.document_crud import document_crud
from docchat.boundary.db.models.document_model import DocumentStatus
from docchat.configs import get_settings
from docchat.observability.logger import configure_logging

logger = logging.getLogger(__name__)


def resolve_document_id(argv: list[str]) -> uuid.UUID | None:
    """
    Document id from argv[1] or DOC_ID.

    Raises:
        ValueError: If the given value is not a UUID
    """
    raw = argv[1] if len(argv) > 1 else os.getenv("DOC_ID")
    if not raw:
        return None
    return uuid.UUID(raw.strip())


async def run_worker(document_id: uuid.UUID | None, cache: ServiceCache | None = None) -> bool:
    """
    Process one document.

    Args:
        document_id: Document to process, None for the oldest in processing
        cache: Collaborators (defaults to one built from settings)

    Returns:
        True if the document ended ready
    """
    cache = cache or ServiceCache()
    await init_models()

    if document_id is None:
        async with cache.session_factory() as db:
            document = await document_crud.get_oldest_by_status(db, DocumentStatus.PROCESSING)
        if document is None:
            logger.info(f"{__name__}:run_worker - No document in processing state")
            return False
        document_id = document.id

    logger.info(f"{__name__}:run_worker - Processing document_id={document_id}")
    result = await cache.processor.run(document_id)
    return result is not None


def main(argv: list[str] | None = None) -> int:
    """CLI entry point; returns the process exit code."""
    argv = sys.argv if argv is None else argv
    configure_logging(get_settings().log_level)

    try:
        document_id = resolve_document_id(argv)
    except ValueError:
        logger.error(f"{__name__}:main - Not a document id: {argv[1:] or os.getenv('DOC_ID')}")
        return 1

    success = asyncio.run(run_worker(document_id))
    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
