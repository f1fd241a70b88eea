"""
Pipeline result model for document processing.

Represents the outcome of processing a document through the pipeline.

Dependencies: pydantic
System role: Return type for DocumentPipeline.process()
"""

from uuid import UUID

from pydantic import BaseModel, Field


class PipelineResult(BaseModel):
    """Result of document processing pipeline execution."""

    document_id: UUID = Field(description="Processed document")
    chunk_count: int = Field(description="Number of chunks stored")
    page_count: int = Field(description="Number of pages extracted")
    superseded_document_ids: list[UUID] = Field(
        default_factory=list,
        description="Documents deleted because this one became active",
    )
    used_fallback_embeddings: bool = Field(
        default=False,
        description="Whether the deterministic hash embedding was used",
    )
    processing_time_ms: float = Field(description="Total processing time in milliseconds")
