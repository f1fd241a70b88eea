"""
FastAPI application with assembled routers.

Initializes the FastAPI app with all API routers and observability
middleware, and configures the uvicorn server.

Dependencies: fastapi, docchat.api.routers, uvicorn
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from docchat.api.deps.dependencies import get_service_cache
from docchat.boundary.db import init_models
from docchat.configs import get_settings
from docchat.observability.logger import configure_logging
from docchat.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware

from .routers import chat_router, health_router, sessions_router, uploads_router
from .routers.health import SERVICE_VERSION

API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Startup: logging, tables, upload directories. Shutdown: wait for
    queued processing jobs so no document is left half-written.
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    logger = logging.getLogger(__name__)

    # Startup
    await init_models()
    cache = get_service_cache()
    await cache.storage.ensure_dirs()
    logger.info(f"{__name__}:lifespan - Started (environment={settings.environment})")

    yield

    # Shutdown
    logger.info(f"{__name__}:lifespan - Draining {cache.queue.pending} processing jobs")
    await cache.queue.drain()
    cache.clear()
    logger.info(f"{__name__}:lifespan - Service cache cleared")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    app = FastAPI(
        title="Document Chat API",
        description="Upload a PDF and ask grounded, cited questions about it",
        version=SERVICE_VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Added last so it runs first and the ID is bound for request logging
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    # Register all routers with /api/v1 prefix for versioning
    app.include_router(health_router, prefix=API_PREFIX)
    app.include_router(sessions_router, prefix=API_PREFIX)
    app.include_router(uploads_router, prefix=API_PREFIX)
    app.include_router(chat_router, prefix=API_PREFIX)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "docchat.api.main:app",
        host="0.0.0.0",
        port=8000,
    )
