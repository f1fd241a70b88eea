"""
Chunk domain model for document processing pipeline.

A page-tagged span of reconstructed text, optionally carrying its embedding.

Dependencies: pydantic
System role: Data structure for document chunks in ingestion pipeline
"""

from pydantic import BaseModel, Field


class Chunk(BaseModel):
    """Document chunk with optional embedding vector."""

    content: str = Field(description="Chunk text content")
    page_start: int = Field(ge=1, description="First contributing page (1-based)")
    page_end: int = Field(ge=1, description="Last contributing page (1-based)")
    chunk_index: int = Field(ge=0, description="Zero-based position in document order")
    embedding: list[float] | None = Field(default=None, description="Embedding vector")
