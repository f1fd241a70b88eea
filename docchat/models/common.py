"""
Common response models.

Error schema shared by every router.

Dependencies: pydantic
System role: Common API response structures
"""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error response schema (FastAPI HTTPException body)."""

    detail: str = Field(description="Error message")
