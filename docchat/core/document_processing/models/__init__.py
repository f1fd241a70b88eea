"""
Models for document processing pipeline.

Exports: Chunk, PageText, TextFragment, PipelineResult
"""

from .chunk import Chunk
from .page import PageText, TextFragment
from .pipeline_result import PipelineResult

__all__ = [
    "Chunk",
    "PageText",
    "PipelineResult",
    "TextFragment",
]
