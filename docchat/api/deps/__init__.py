"""API-specific dependencies."""

# Re-export common dependencies
from .dependencies import (
    ServiceCache,
    get_chat_service,
    get_service_cache,
    get_session_service,
    get_upload_service,
)

__all__ = [
    "ServiceCache",
    "get_chat_service",
    "get_service_cache",
    "get_session_service",
    "get_upload_service",
]
