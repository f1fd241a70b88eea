"""
Domain error handling for API routers.

A decorator that logs domain exceptions and turns them into
HTTPExceptions carrying the status code of the exception family.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status

from docchat.core.exceptions import DocChatException
from docchat.models.common import ErrorResponse
from docchat.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

# OpenAPI documentation for the error bodies produced below
ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    code: {"model": ErrorResponse} for code in (400, 401, 404, 409, 413, 500)
}

# Type for the decorated function
F = TypeVar("F", bound=Callable[..., Any])


def handle_domain_errors(func: F) -> F:
    """
    Map DocChatException subclasses to HTTP errors.

    - 4xx domain errors are logged at WARNING with their details
    - 5xx domain errors and unexpected exceptions are logged with traceback
    - HTTPExceptions raised by the endpoint pass through unchanged
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except HTTPException:
            raise

        except DocChatException as e:
            if e.status_code < 500:
                logger.warning(
                    f"{func.__name__} - {type(e).__name__}: {e.message}",
                    extra={"status_code": e.status_code, "details": e.details},
                )
            else:
                log_exception_with_context(
                    logger, f"{func.__name__} - {type(e).__name__}", e, details=e.details
                )
            raise HTTPException(status_code=e.status_code, detail=e.message) from e

        except Exception as e:
            log_exception_with_context(logger, f"{func.__name__} - Unexpected failure", e)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Internal server error",
            ) from e

    return wrapper  # type: ignore
