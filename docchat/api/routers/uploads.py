"""
Upload API endpoints.

Routes:
- POST /uploads/init - Issue an upload ticket for a new document
- POST /uploads/chunk - Append raw bytes (ticket in ?token= or Authorization: Bearer)
- POST /uploads/complete - Finalize and queue processing

Dependencies: docchat.application.services.upload_service, docchat.models.upload
System role: Resumable upload HTTP API
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from docchat.api.deps import get_upload_service
from docchat.api.routers.error_handling import ERROR_RESPONSES, handle_domain_errors
from docchat.application.services import UploadService
from docchat.models.upload import (
    ChunkUploadResponse,
    CompleteUploadRequest,
    CompleteUploadResponse,
    InitUploadRequest,
    InitUploadResponse,
)
from docchat.observability.log_utils import log_with_context, redact_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/uploads", tags=["uploads"], responses=ERROR_RESPONSES)

BEARER_PREFIX = "bearer "


def resolve_token(request: Request, token: str | None) -> str:
    """
    Ticket from the query string or the Authorization header.

    Raises:
        HTTPException(401): No ticket supplied
    """
    if token:
        return token
    authorization = request.headers.get("authorization", "")
    if authorization.lower().startswith(BEARER_PREFIX):
        bearer = authorization[len(BEARER_PREFIX):].strip()
        if bearer:
            return bearer
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing token")


async def read_chunk_body(request: Request, max_bytes: int) -> bytes:
    """
    Read the raw body, stopping once it holds more than max_bytes.

    At most max_bytes + 1 bytes are kept; the upload service sees a total
    over the cap and fails the upload.
    """
    body = bytearray()
    async for part in request.stream():
        body += part
        if len(body) > max_bytes:
            break
    return bytes(body[: max_bytes + 1])


@router.post("/init", response_model=InitUploadResponse)
@handle_domain_errors
async def init_upload(
    request: InitUploadRequest,
    upload_service: UploadService = Depends(get_upload_service),
) -> InitUploadResponse:
    """
    Start an upload.

    Creates a session when none is given, makes the new document active and
    clears the session's chat history.

    Raises:
        HTTPException(404): session_id given but not found
        HTTPException(413): Declared size above the cap
    """
    return await upload_service.init_upload(request)


@router.post("/chunk", response_model=ChunkUploadResponse)
@handle_domain_errors
async def upload_chunk(
    request: Request,
    token: str | None = Query(default=None),
    upload_service: UploadService = Depends(get_upload_service),
) -> ChunkUploadResponse:
    """
    Append the raw request body to the upload.

    Raises:
        HTTPException(400): Empty body
        HTTPException(401): Missing, invalid or expired ticket
        HTTPException(409): Upload already finalized
        HTTPException(413): Size cap crossed (document is marked failed)
    """
    ticket = resolve_token(request, token)
    data = await read_chunk_body(request, upload_service.settings.max_bytes)
    log_with_context(
        logger,
        logging.DEBUG,
        f"{__name__}:upload_chunk - Received chunk",
        token=redact_token(ticket),
        body=data,
    )
    return await upload_service.append_chunk(ticket, data)


@router.post("/complete", response_model=CompleteUploadResponse)
@handle_domain_errors
async def complete_upload(
    request: CompleteUploadRequest,
    upload_service: UploadService = Depends(get_upload_service),
) -> CompleteUploadResponse:
    """
    Finalize the upload; processing continues in the background.

    Raises:
        HTTPException(400): No bytes were uploaded
        HTTPException(401): Invalid or expired ticket
        HTTPException(409): Already finalized
        HTTPException(413): Final size above the cap
    """
    return await upload_service.complete_upload(request.token, request.filename)
