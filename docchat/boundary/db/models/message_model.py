"""
Message ORM model.

One turn of a session's conversation. Assistant turns carry the
citations and the document that grounded them.

Dependencies: sqlalchemy, docchat.boundary.db.base
System role: Chat transcript persistence
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import JSON, DateTime, Enum, ForeignKey, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from docchat.boundary.db.base import Base, UUIDMixin, utc_now


class MessageRole(str, enum.Enum):
    """Author of a message."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class MessageModel(Base, UUIDMixin):
    """
    Message ORM model. Rows are immutable once inserted.

    Attributes:
        id: UUID primary key
        session_id: Owning session (cascade delete)
        role: user, assistant or system
        content: Message text
        document_id: Document the exchange was answered from
        citations: Ranked retrieval results used for the answer (assistant only)
        message_metadata: Open extension bag
        created_at: Insert timestamp, defines transcript order
    """

    __tablename__ = "messages"

    session_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[MessageRole] = mapped_column(
        Enum(MessageRole, native_enum=False),
        nullable=False,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    document_id: Mapped[uuid.UUID | None] = mapped_column(Uuid(as_uuid=True), nullable=True)
    citations: Mapped[list | None] = mapped_column(JSON, nullable=True)
    message_metadata: Mapped[dict] = mapped_column("metadata", JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )

    session = relationship("SessionModel", back_populates="messages")
