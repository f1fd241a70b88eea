"""
Chat domain models and schemas.

Request/response schemas for chat operations.

Dependencies: pydantic
System role: Chat API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from docchat.models.citation import Citation


class ChatRequest(BaseModel):
    """Request schema for a streamed question."""

    session_id: uuid.UUID
    question: str = Field(description="User question")
    top_k: int | None = Field(default=None, description="Chunks to retrieve (default 5, max 10)")

    @field_validator("question")
    @classmethod
    def question_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("question must not be empty")
        return value.strip()


class MessageResponse(BaseModel):
    """Single chat message in history."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: uuid.UUID
    role: str = Field(description="Message role: 'user', 'assistant' or 'system'")
    content: str
    document_id: uuid.UUID | None = None
    citations: list[Citation] | None = None
    created_at: datetime
