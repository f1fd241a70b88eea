"""
Document ORM model.

Represents an uploaded document with its processing status and extracted text.
Tracks the ingestion lifecycle from upload to chunk indexing.

Dependencies: sqlalchemy, docchat.boundary.db.base
System role: Document persistence for ingestion tracking
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import JSON, BigInteger, DateTime, Enum, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from docchat.boundary.db.base import Base, TimestampMixin, UUIDMixin


class DocumentStatus(str, enum.Enum):
    """
    Document processing lifecycle states.

    PENDING: Row created, upload not started
    UPLOADING: Receiving byte chunks under an upload ticket
    PROCESSING: Upload finalized; extraction, chunking and embedding running
    READY: Chunks indexed, document can answer questions
    FAILED: Upload or processing error; error_message holds details
    """

    PENDING = "pending"
    UPLOADING = "uploading"
    PROCESSING = "processing"
    READY = "ready"
    FAILED = "failed"


class DocumentModel(Base, UUIDMixin, TimestampMixin):
    """
    Document ORM model tracking ingestion pipeline state.

    Lifecycle: init (PENDING -> UPLOADING) -> finalize (PROCESSING) ->
    processor (READY or FAILED). Status changes go through
    docchat.core.document_state so illegal transitions are rejected.

    Attributes:
        id: UUID primary key (auto-generated)
        session_id: Owning session (cascade delete)
        title: Display title
        content: Extracted full text, set when READY
        status: Current processing state
        file_path: Finalized file location (set on finalize)
        size_bytes: Bytes received so far / final size
        upload_completed_at: When finalize promoted the upload
        error_message: Failure reason when FAILED, cleared on success
        doc_metadata: Provenance bag (filename, client supplied fields)

    Relationships:
        session: Parent SessionModel
        chunks: Indexed chunks (cascade delete)
    """

    __tablename__ = "documents"

    session_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    title: Mapped[str] = mapped_column(String(256), nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False, default="")

    status: Mapped[DocumentStatus] = mapped_column(
        Enum(DocumentStatus, native_enum=False),
        nullable=False,
        default=DocumentStatus.PENDING,
    )

    file_path: Mapped[str | None] = mapped_column(
        String(1024),
        nullable=True,
        doc="Finalized file path",
    )

    size_bytes: Mapped[int | None] = mapped_column(BigInteger, nullable=True)

    upload_completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    error_message: Mapped[str | None] = mapped_column(
        String(2048),
        nullable=True,
        doc="Error details if upload or processing failed",
    )

    doc_metadata: Mapped[dict] = mapped_column(
        "metadata",
        JSON,
        nullable=False,
        default=dict,
        doc="Provenance fields (filename, size, client metadata)",
    )

    # Relationships
    session = relationship("SessionModel", back_populates="documents")
    chunks = relationship(
        "ChunkModel",
        back_populates="document",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ChunkModel.chunk_index",
    )
