"""
Citation domain model.

One ranked retrieval result used to ground an answer. The same list is
used to build the prompt, sent in the citations event and stored on the
assistant message.

Dependencies: pydantic
System role: Citation data structure
"""

import uuid
from typing import Any

from pydantic import BaseModel, Field


class Citation(BaseModel):
    """Citation model for source attribution."""

    chunk_id: uuid.UUID = Field(description="Chunk identifier for tracing")
    rank: int = Field(ge=1, description="1-based position; matches [n] markers in the answer")
    content: str = Field(description="Chunk text shown to the model")
    score: float = Field(description="Cosine distance to the question (smaller is closer)")
    page_start: int = Field(description="First page of the chunk")
    page_end: int = Field(description="Last page of the chunk")
    chunk_index: int = Field(description="Position of the chunk in its document")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Chunk provenance")
