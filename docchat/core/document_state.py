"""
Document status state machine.

Single source of truth for which status changes are legal. Every code
path that mutates a document's status (upload init, chunk append,
finalize, background processing, worker CLI) goes through here.

Dependencies: docchat.boundary.db.models, docchat.core.exceptions
System role: Document lifecycle guard
"""

import logging

from docchat.boundary.db.models.document_model import DocumentStatus
from docchat.core.exceptions import ConflictError, InvalidTransitionError

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[DocumentStatus, frozenset[DocumentStatus]] = {
    DocumentStatus.PENDING: frozenset({DocumentStatus.UPLOADING}),
    DocumentStatus.UPLOADING: frozenset(
        {DocumentStatus.UPLOADING, DocumentStatus.PROCESSING, DocumentStatus.FAILED}
    ),
    DocumentStatus.PROCESSING: frozenset({DocumentStatus.READY, DocumentStatus.FAILED}),
    DocumentStatus.READY: frozenset(),
    DocumentStatus.FAILED: frozenset(),
}

# Statuses in which the upload ticket may still append bytes
APPENDABLE = frozenset({DocumentStatus.UPLOADING})


def can_transition(current: DocumentStatus, target: DocumentStatus) -> bool:
    """Whether moving from current to target is a legal lifecycle step."""
    return target in ALLOWED_TRANSITIONS[current]


def ensure_transition(document_id: str, current: DocumentStatus, target: DocumentStatus) -> None:
    """
    Validate a status change.

    Args:
        document_id: Document being changed (for error context)
        current: Status the document has now
        target: Status the caller wants to write

    Raises:
        InvalidTransitionError: If the change is not allowed
    """
    if not can_transition(current, target):
        logger.warning(
            f"{__name__}:ensure_transition - Rejected {current.value} -> {target.value} "
            f"for document_id={document_id}"
        )
        raise InvalidTransitionError(document_id, current.value, target.value)


def ensure_appendable(document_id: str, status: DocumentStatus) -> None:
    """
    Reject byte appends once a document has left the uploading state.

    A straggler chunk arriving after finalize would otherwise corrupt a
    file already handed to the processor.

    Raises:
        ConflictError: If the document is processing, ready, failed or pending
    """
    if status in APPENDABLE:
        return
    if status in (DocumentStatus.PROCESSING, DocumentStatus.READY):
        message = "Upload already completed or processing"
    else:
        message = f"Upload is not accepting data (status={status.value})"
    raise ConflictError(message, details={"document_id": document_id, "status": status.value})
