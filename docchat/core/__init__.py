"""
Core business logic module.

Domain rules for the document chat service: exception hierarchy,
document lifecycle, upload tickets, ingestion pipeline, embedding,
retrieval and answer streaming.
"""

from docchat.core.exceptions import (
    AuthError,
    CapacityError,
    ConflictError,
    DocChatException,
    NotFoundError,
    ProcessingError,
    ValidationError,
)

__all__ = [
    "AuthError",
    "CapacityError",
    "ConflictError",
    "DocChatException",
    "NotFoundError",
    "ProcessingError",
    "ValidationError",
]
