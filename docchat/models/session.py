"""
Session domain models and schemas.

Request/response schemas for session operations.

Dependencies: pydantic
System role: Session API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from docchat.models.chat import MessageResponse
from docchat.models.document import DocumentResponse


class CreateSessionRequest(BaseModel):
    """Request schema for creating a new session."""

    title: str = Field(default="Chat Session", max_length=256, description="Session title")


class SessionResponse(BaseModel):
    """Response schema for session operations."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    active_document_id: uuid.UUID | None = None
    created_at: datetime
    updated_at: datetime


class SessionDetailResponse(BaseModel):
    """Session with its active document and transcript."""

    session: SessionResponse
    active_document: DocumentResponse | None = None
    messages: list[MessageResponse]


class ResetSessionResponse(BaseModel):
    """Counts of rows removed by a session reset."""

    session_id: uuid.UUID
    cleared_messages: int
    cleared_documents: int
    note: str = "Reset clears documents, embeddings, and chat history for this session."


class CleanupResponse(BaseModel):
    """Counts of rows removed by the retention cleanup."""

    session_id: uuid.UUID
    deleted_documents: int
    deleted_chunks: int
