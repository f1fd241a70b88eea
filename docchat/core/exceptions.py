"""
Exception hierarchy for the document chat application.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging, and
each family carries the HTTP status the API boundary maps it to.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class DocChatException(Exception):
    """Base exception for all document chat application errors."""

    status_code: int = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(DocChatException):
    """Raised when input validation fails."""

    status_code = 400

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class UploadNotFoundError(ValidationError):
    """Raised when finalizing an upload that never received any bytes."""

    def __init__(self, document_id: str) -> None:
        super().__init__("Upload not found", details={"document_id": document_id})


class DocumentNotReadyError(ValidationError):
    """Raised when the active document has not finished processing."""

    def __init__(self, document_id: str, status: str) -> None:
        super().__init__(
            "Active document is not ready",
            details={"document_id": document_id, "status": status},
        )


class DocumentNotIndexedError(ValidationError):
    """Raised when retrieval finds no chunks for the active document."""

    def __init__(self, document_id: str) -> None:
        super().__init__(
            "Document has no indexed chunks yet. Re-upload or retry processing.",
            details={"document_id": document_id},
        )


class AuthError(DocChatException):
    """Raised when an upload ticket is missing or cannot be trusted."""

    status_code = 401

    def __init__(self, message: str = "Invalid token", details: dict[str, Any] | None = None) -> None:
        super().__init__(message, details)


class InvalidTokenError(AuthError):
    """Malformed ticket or signature mismatch."""

    def __init__(self, reason: str) -> None:
        super().__init__("Invalid token", details={"reason": reason})


class TokenExpiredError(AuthError):
    """Ticket signature is valid but its expiry has passed."""

    def __init__(self, expired_at: int) -> None:
        super().__init__("Invalid token", details={"reason": "expired", "expired_at": expired_at})


class NotFoundError(DocChatException):
    """Raised when a session or document cannot be found."""

    status_code = 404


class SessionNotFoundError(NotFoundError):
    """Raised when a session cannot be found."""

    def __init__(self, session_id: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize session not found error.

        Args:
            session_id: ID of the missing session
            details: Additional context
        """
        details = details or {}
        details["session_id"] = session_id
        super().__init__(f"Session not found: {session_id}", details)


class DocumentNotFoundError(NotFoundError):
    """Raised when a document cannot be found within its session."""

    def __init__(self, document_id: str, session_id: str | None = None) -> None:
        details: dict[str, Any] = {"document_id": document_id}
        if session_id:
            details["session_id"] = session_id
        super().__init__(f"Document not found: {document_id}", details)


class NoActiveDocumentError(NotFoundError):
    """Raised when a session has no active document to answer from."""

    def __init__(self, session_id: str) -> None:
        super().__init__("No active document for session", details={"session_id": session_id})


class ConflictError(DocChatException):
    """Raised when an operation conflicts with the current document state."""

    status_code = 409


class InvalidTransitionError(ConflictError):
    """Raised when a document status change is not allowed."""

    def __init__(self, document_id: str, current: str, target: str) -> None:
        super().__init__(
            f"Cannot move document from {current} to {target}",
            details={"document_id": document_id, "current": current, "target": target},
        )


class CapacityError(DocChatException):
    """Raised when an upload exceeds the size cap."""

    status_code = 413

    def __init__(self, size_bytes: int, max_bytes: int, document_id: str | None = None) -> None:
        details: dict[str, Any] = {"size_bytes": size_bytes, "max_bytes": max_bytes}
        if document_id:
            details["document_id"] = document_id
        super().__init__("max upload size exceeded", details)


class ProcessingError(DocChatException):
    """Base exception for extraction, embedding and model failures."""

    status_code = 500

    def __init__(
        self,
        message: str,
        document_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize processing error.

        Args:
            message: Error message
            document_id: ID of the document that failed
            details: Additional context
        """
        details = details or {}
        if document_id:
            details["document_id"] = document_id
        super().__init__(message, details)


class ExtractionError(ProcessingError):
    """Raised when document text extraction fails."""

    pass


class EmbeddingError(ProcessingError):
    """Raised when an embedding provider returns unusable output."""

    pass


class ModelUnavailableError(ProcessingError):
    """Raised when no chat model is configured."""

    def __init__(self) -> None:
        super().__init__("Chat model is not configured (LLM_GOOGLE_API_KEY not set)")
