"""
Extraction models: positioned text fragments and reconstructed pages.

Dependencies: pydantic
System role: Intermediate data between PDF parsing and chunking
"""

from pydantic import BaseModel, Field


class TextFragment(BaseModel):
    """
    A run of text at a position on the page.

    Coordinates follow PDF user space: y grows upwards.
    """

    text: str
    x: float
    y: float


class PageText(BaseModel):
    """Reconstructed text of one page in reading order."""

    page_number: int = Field(ge=1)
    text: str
