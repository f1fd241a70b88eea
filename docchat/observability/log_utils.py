"""
Logging utilities for safe structured logging.

Helpers that keep raw upload bytes and full upload tickets out of log
records while still giving useful context.

Dependencies: logging (stdlib)
System role: Logging helper functions
"""

import logging
from typing import Any


def redact_token(token: str | None, keep: int = 8) -> str:
    """Short, non-replayable form of an upload ticket for logs."""
    if not token:
        return "<none>"
    return f"{token[:keep]}...({len(token)} chars)"


def safe_log_value(value: Any, max_length: int = 200) -> str:
    """
    Convert a value to a bounded string for logging.

    Byte payloads are summarized by length, collections by size.

    Args:
        value: Value to convert
        max_length: Maximum length before truncating

    Returns:
        str: Safe string representation
    """
    if value is None:
        return "None"
    if isinstance(value, (bytes, bytearray, memoryview)):
        return f"<{len(value)} bytes>"
    if isinstance(value, (list, tuple, set)):
        text = f"{type(value).__name__}({len(value)} items)"
    elif isinstance(value, dict):
        text = f"dict({len(value)} keys)"
    else:
        text = str(value)

    if len(text) > max_length:
        return text[:max_length] + f"... (truncated, {len(text)} total)"
    return text


def log_with_context(logger: logging.Logger, level: int, message: str, **context: Any) -> None:
    """
    Log a message with structured extra fields, each made safe first.

    Args:
        logger: Logger instance
        level: Log level (logging.INFO, etc.)
        message: Log message
        **context: Extra fields
    """
    logger.log(level, message, extra={key: safe_log_value(val) for key, val in context.items()})


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: Exception,
    **context: Any,
) -> None:
    """
    Log an exception with traceback and structured extra fields.

    Args:
        logger: Logger instance
        message: Log message
        exc: Exception instance
        **context: Extra fields
    """
    extra = {key: safe_log_value(val) for key, val in context.items()}
    extra["error_type"] = type(exc).__name__
    extra["error_msg"] = safe_log_value(str(exc))
    logger.exception(message, extra=extra)
