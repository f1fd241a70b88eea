"""
Session API endpoints.

Routes:
- POST /sessions - Create new session
- GET /sessions/{id} - Session with active document and transcript
- GET /sessions/{id}/documents/{doc_id} - Document status (processing progress)
- POST /sessions/{id}/reset - Delete all documents and messages
- POST /sessions/{id}/cleanup - Delete documents older than a retention window

Dependencies: docchat.application.services, docchat.models
System role: Session management HTTP API
"""

import logging
from datetime import timedelta
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, Query

from docchat.api.deps import (
    ServiceCache,
    get_service_cache,
    get_session_service,
    get_upload_service,
)
from docchat.api.routers.error_handling import ERROR_RESPONSES, handle_domain_errors
from docchat.application.services import SessionService, UploadService
from docchat.models.document import DocumentResponse
from docchat.models.session import (
    CleanupResponse,
    CreateSessionRequest,
    ResetSessionResponse,
    SessionDetailResponse,
    SessionResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"], responses=ERROR_RESPONSES)


@router.post("", response_model=SessionResponse)
@handle_domain_errors
async def create_session(
    request: CreateSessionRequest,
    session_service: SessionService = Depends(get_session_service),
) -> SessionResponse:
    """
    Create new session.

    Args:
        request: CreateSessionRequest with optional title
        session_service: Injected SessionService

    Returns:
        SessionResponse: Created session
    """
    return await session_service.create_session(title=request.title)


@router.get("/{session_id}", response_model=SessionDetailResponse)
@handle_domain_errors
async def get_session(
    session_id: UUID,
    session_service: SessionService = Depends(get_session_service),
) -> SessionDetailResponse:
    """
    Get a session with its active document and messages in creation order.

    Raises:
        HTTPException(404): Session not found
    """
    return await session_service.get_session(session_id)


@router.get("/{session_id}/documents/{document_id}", response_model=DocumentResponse)
@handle_domain_errors
async def get_document(
    session_id: UUID,
    document_id: UUID,
    upload_service: UploadService = Depends(get_upload_service),
) -> DocumentResponse:
    """
    Poll a document's status after finalize.

    Raises:
        HTTPException(404): Document not found in this session
    """
    document = await upload_service.get_document_status(document_id, session_id)
    return DocumentResponse.model_validate(document)


@router.post("/{session_id}/reset", response_model=ResetSessionResponse)
@handle_domain_errors
async def reset_session(
    session_id: UUID,
    background_tasks: BackgroundTasks,
    session_service: SessionService = Depends(get_session_service),
    cache: ServiceCache = Depends(get_service_cache),
) -> ResetSessionResponse:
    """
    Delete all messages, documents and embeddings of a session.

    Files of the deleted documents are removed after the response is sent.

    Raises:
        HTTPException(404): Session not found
    """
    response, document_ids = await session_service.reset_session(session_id)
    if document_ids:
        background_tasks.add_task(cache.storage.remove_document_files, document_ids)
    return response


@router.post("/{session_id}/cleanup", response_model=CleanupResponse)
@handle_domain_errors
async def cleanup_session(
    session_id: UUID,
    background_tasks: BackgroundTasks,
    older_than_hours: float | None = Query(default=None, ge=0),
    session_service: SessionService = Depends(get_session_service),
    cache: ServiceCache = Depends(get_service_cache),
) -> CleanupResponse:
    """
    Delete documents older than older_than_hours (default: retention setting).

    Raises:
        HTTPException(404): Session not found
    """
    if older_than_hours is None:
        older_than_hours = cache.settings.ingestion.retention_hours
    response, document_ids = await session_service.cleanup_old_documents(
        session_id, timedelta(hours=older_than_hours)
    )
    if document_ids:
        background_tasks.add_task(cache.storage.remove_document_files, document_ids)
    return response
