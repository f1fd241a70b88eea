"""
Logger configuration.

Configures the root logger once at startup: stdout handler, timestamped
format including the request correlation ID, quieter third-party loggers.

Dependencies: logging (stdlib), docchat.observability.correlation
System role: Centralized logging configuration
"""

import logging
import sys

from docchat.observability.correlation import CorrelationIdFilter

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(correlation_id)s] %(message)s"

NOISY_LOGGERS = (
    "httpx",
    "httpcore",
    "urllib3",
    "sqlalchemy.engine",
    "aiosqlite",
    "google_genai",
    "pypdf",
)


def configure_logging(level: str = "INFO") -> None:
    """
    Configure Python logging for the service.

    Args:
        level: Root log level name (DEBUG, INFO, ...)
    """
    # Remove any existing handlers to avoid duplicates on reload
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(CorrelationIdFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    root_logger.setLevel(level.upper())
    root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get configured logger.

    Args:
        name: Logger name (usually __name__)

    Returns:
        logging.Logger: Logger instance
    """
    return logging.getLogger(name)
