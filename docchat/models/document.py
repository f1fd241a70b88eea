"""
Document domain models and schemas.

Response schema for document rows.

Dependencies: pydantic
System role: Document API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class DocumentResponse(BaseModel):
    """Response schema for document operations."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: uuid.UUID
    session_id: uuid.UUID
    title: str
    status: str
    file_path: str | None = None
    size_bytes: int | None = None
    upload_completed_at: datetime | None = None
    error_message: str | None = None
    metadata: dict = Field(default_factory=dict, validation_alias="doc_metadata")
    created_at: datetime
    updated_at: datetime
