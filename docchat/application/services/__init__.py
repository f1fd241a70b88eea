"""Service orchestrators."""

from .chat_service import ChatService
from .document_processor import DocumentProcessor
from .session_service import SessionService
from .upload_service import UploadService

__all__ = [
    "ChatService",
    "DocumentProcessor",
    "SessionService",
    "UploadService",
]
