"""
Chat streaming endpoint.

Routes: POST /chat/stream

Every check that can fail runs before the response starts, so those
failures return a normal JSON error. Once streaming has begun, failures
are reported in-band as an error frame followed by [DONE].

Dependencies: docchat.application.services.chat_service, docchat.models.chat
System role: Streaming chat HTTP API
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from docchat.api.deps import get_chat_service
from docchat.api.routers.error_handling import ERROR_RESPONSES, handle_domain_errors
from docchat.application.services import ChatService
from docchat.models.chat import ChatRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"], responses=ERROR_RESPONSES)

SSE_HEADERS = {
    "Cache-Control": "no-cache, no-transform",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


@router.post("/stream")
@handle_domain_errors
async def chat_stream(
    request: ChatRequest,
    chat_service: ChatService = Depends(get_chat_service),
) -> StreamingResponse:
    """
    Ask a question about the session's active document.

    Frames: {"type":"start"}, raw text deltas, {"type":"citations",...}, [DONE].

    Raises:
        HTTPException(400): Document not ready or not indexed
        HTTPException(404): Session or active document not found
        HTTPException(500): No chat model configured
    """
    stream = await chat_service.prepare_answer(
        request.session_id, request.question, request.top_k
    )
    logger.info(f"{__name__}:chat_stream - Opening stream for session_id={request.session_id}")
    return StreamingResponse(stream.sse(), media_type="text/event-stream", headers=SSE_HEADERS)
