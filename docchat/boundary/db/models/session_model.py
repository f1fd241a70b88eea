"""
Session ORM model.

Represents a conversation context with its documents and chat history.
The active document pointer selects the single document used for retrieval.

Dependencies: sqlalchemy, docchat.boundary.db.base
System role: Session persistence for chat context management
"""

import uuid

from sqlalchemy import String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from docchat.boundary.db.base import Base, TimestampMixin, UUIDMixin


class SessionModel(Base, UUIDMixin, TimestampMixin):
    """
    Session ORM model for isolating chat and document scope.

    active_document_id is intentionally not a foreign key: it is owned by
    the upload-init, processing-completion and reset operations, which
    keep it consistent inside their own transactions.

    Attributes:
        id: UUID primary key (auto-generated)
        title: Display title
        active_document_id: Document currently used for retrieval (nullable)
        documents: Documents uploaded into this session (cascading delete)
        messages: Chat transcript (cascading delete)

    Relationships:
        documents: One-to-many with DocumentModel
        messages: One-to-many with MessageModel
    """

    __tablename__ = "sessions"

    title: Mapped[str] = mapped_column(
        String(256),
        nullable=False,
        default="Untitled Session",
    )

    active_document_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        nullable=True,
        default=None,
        doc="Document currently answering questions for this session",
    )

    # Relationships
    documents = relationship(
        "DocumentModel",
        back_populates="session",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    messages = relationship(
        "MessageModel",
        back_populates="session",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
