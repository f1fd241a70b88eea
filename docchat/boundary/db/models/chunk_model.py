"""
Chunk ORM model.

A bounded, page-tagged span of document text with its embedding vector.

Dependencies: sqlalchemy, docchat.boundary.db.base
System role: Retrieval unit persistence
"""

import uuid
from datetime import datetime

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from docchat.boundary.db.base import Base, UUIDMixin, utc_now


class ChunkModel(Base, UUIDMixin):
    """
    Chunk ORM model.

    Embeddings are stored as JSON float lists and ranked in-process, so the
    same schema runs on PostgreSQL and SQLite.

    Attributes:
        id: UUID primary key
        document_id: Owning document (cascade delete)
        content: Chunk text
        embedding: Fixed-dimension vector
        chunk_index: Zero-based position in document order
        page_start: First contributing page (1-based)
        page_end: Last contributing page (1-based)
        chunk_metadata: Provenance bag (source path)
        created_at: Insert timestamp
    """

    __tablename__ = "chunks"

    document_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    embedding: Mapped[list[float]] = mapped_column(JSON, nullable=False)
    chunk_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    page_start: Mapped[int] = mapped_column(Integer, nullable=False)
    page_end: Mapped[int] = mapped_column(Integer, nullable=False)
    chunk_metadata: Mapped[dict] = mapped_column("metadata", JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )

    document = relationship("DocumentModel", back_populates="chunks")
