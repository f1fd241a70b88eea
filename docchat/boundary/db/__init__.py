"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(), init_models()
  - SessionModel, DocumentModel, ChunkModel, MessageModel: Domain entities
  - DocumentStatus, MessageRole: Enum types
  - session_crud, document_crud, chunk_crud, message_crud: CRUD singletons

Dependencies: sqlalchemy, docchat.configs
System role: Persistent storage for sessions, documents, chunks and transcripts
"""

from docchat.boundary.db.base import Base, TimestampMixin, UUIDMixin
from docchat.boundary.db.connection import (
    get_async_db,
    get_async_engine,
    get_async_session_factory,
    init_models,
)
from docchat.boundary.db.models import (
    ChunkModel,
    DocumentModel,
    DocumentStatus,
    MessageModel,
    MessageRole,
    SessionModel,
)
from docchat.boundary.db.CRUD import (
    BaseCRUD,
    chunk_crud,
    document_crud,
    message_crud,
    session_crud,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    "init_models",
    "ChunkModel",
    "DocumentModel",
    "DocumentStatus",
    "MessageModel",
    "MessageRole",
    "SessionModel",
    "BaseCRUD",
    "chunk_crud",
    "document_crud",
    "message_crud",
    "session_crud",
]
