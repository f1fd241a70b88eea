"""
Upload protocol schemas.

Request/response schemas for ticket issuance, chunk append and finalize.

Dependencies: pydantic
System role: Upload API contracts
"""

import uuid
from typing import Any, Literal

from pydantic import BaseModel, Field


class InitUploadRequest(BaseModel):
    """Request schema for starting an upload."""

    session_id: uuid.UUID | None = Field(default=None, description="Existing session to upload into")
    title: str = Field(default="Uploaded Document", max_length=256)
    filename: str | None = Field(default=None, max_length=512, description="Client filename")
    size_bytes: int = Field(ge=0, description="Declared total size of the file")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Client provenance fields")


class InitUploadResponse(BaseModel):
    """Ticket and identifiers for a new upload."""

    token: str
    document_id: uuid.UUID
    session_id: uuid.UUID
    nonce: str
    expires_at: int
    max_bytes: int


class ChunkUploadResponse(BaseModel):
    """Progress after appending one byte range."""

    received_bytes: int
    total_bytes: int


class CompleteUploadRequest(BaseModel):
    """Request schema for finalizing an upload."""

    token: str = Field(min_length=1)
    filename: str | None = Field(default=None, max_length=512)


class CompleteUploadResponse(BaseModel):
    """Finalize acknowledgement; processing continues in the background."""

    ok: bool = True
    document_id: uuid.UUID
    size_bytes: int
    status: Literal["processing"] = "processing"
