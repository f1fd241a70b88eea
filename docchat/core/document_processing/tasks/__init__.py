"""
Task modules for document processing pipeline.

Exports: ParsingTask, ChunkingTask and their pure helpers
"""

from .chunking_task import ChunkingTask, hybrid_chunk
from .parsing_task import ParsingTask, group_fragments

__all__ = [
    "ChunkingTask",
    "ParsingTask",
    "group_fragments",
    "hybrid_chunk",
]
