"""
Database models package.

Exports:
  - SessionModel: Session ORM model
  - DocumentModel, DocumentStatus: Document ORM model and status enum
  - ChunkModel: Embedded text chunk
  - MessageModel, MessageRole: Chat transcript rows

Dependencies: sqlalchemy, docchat.boundary.db.base
System role: Database model definitions for domain entities
"""

from docchat.boundary.db.models.chunk_model import ChunkModel
from docchat.boundary.db.models.document_model import DocumentModel, DocumentStatus
from docchat.boundary.db.models.message_model import MessageModel, MessageRole
from docchat.boundary.db.models.session_model import SessionModel

__all__ = [
    "ChunkModel",
    "DocumentModel",
    "DocumentStatus",
    "MessageModel",
    "MessageRole",
    "SessionModel",
]
