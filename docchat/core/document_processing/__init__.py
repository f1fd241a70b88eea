"""
Document processing pipeline for ingestion.

Parsing, chunking and embedding of finalized uploads.

Dependencies: pypdf, pydantic, docchat.core.embedding_gateway
System role: Document ingestion pipeline entrypoint
"""

from .entrypoint import DocumentPipeline, ProcessedDocument
from .models import Chunk, PageText, PipelineResult, TextFragment

__all__ = [
    "Chunk",
    "DocumentPipeline",
    "PageText",
    "PipelineResult",
    "ProcessedDocument",
    "TextFragment",
]
