"""
Health check API endpoints.

Routes: GET /health

Dependencies: fastapi
System role: Health check HTTP API
"""

from fastapi import APIRouter
from pydantic import BaseModel

SERVICE_NAME = "docchat"
SERVICE_VERSION = "0.1.0"


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    service: str
    version: str


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check."""
    return HealthResponse(status="ok", service=SERVICE_NAME, version=SERVICE_VERSION)
