"""
Hybrid paragraph-aware chunking.

Paragraphs (blank-line separated) accumulate into a buffer. Before a
paragraph is added, the buffer is flushed if adding it would exceed the
upper bound and the buffer already holds at least the lower bound.
Chunk size stays bounded while breaks land on paragraph boundaries.

Dependencies: re
System role: Second stage of document ingestion pipeline
"""

import re

from ..models import Chunk, PageText

DEFAULT_MAX_CHARS = 1400
DEFAULT_MIN_CHARS = 600
EMPTY_DOCUMENT_TEXT = "No extractable text was found in this document."
PARAGRAPH_SEPARATOR = "\n\n"

_PARAGRAPH_BREAK = re.compile(r"\n{2,}")


def split_paragraphs(text: str) -> list[str]:
    """Split page text on blank lines, dropping empty paragraphs."""
    return [p.strip() for p in _PARAGRAPH_BREAK.split(text) if p.strip()]


def hybrid_chunk(
    pages: list[PageText],
    max_chars: int = DEFAULT_MAX_CHARS,
    min_chars: int = DEFAULT_MIN_CHARS,
) -> list[Chunk]:
    """
    Chunk page texts with the two-threshold policy.

    A chunk exceeds max_chars only when a single paragraph is longer than
    max_chars on its own. Any non-empty remainder is flushed at the end.

    Args:
        pages: Page texts in document order
        max_chars: Upper bound that triggers a flush
        min_chars: Buffered size required before a flush is allowed

    Returns:
        list[Chunk]: Chunks with contiguous chunk_index from 0
    """
    chunks: list[Chunk] = []
    if not pages:
        return chunks

    current = ""
    start_page = end_page = pages[0].page_number

    def flush() -> None:
        chunks.append(
            Chunk(
                content=current,
                page_start=start_page,
                page_end=end_page,
                chunk_index=len(chunks),
            )
        )

    for page in pages:
        for paragraph in split_paragraphs(page.text):
            candidate = paragraph if not current else f"{current}{PARAGRAPH_SEPARATOR}{paragraph}"
            if len(candidate) > max_chars and len(current) >= min_chars:
                flush()
                current = paragraph
                start_page = end_page = page.page_number
            else:
                if not current:
                    start_page = page.page_number
                current = candidate
                end_page = page.page_number

    if current.strip():
        flush()

    return chunks


class ChunkingTask:
    """Split extracted pages into bounded, page-tagged chunks."""

    def __init__(
        self,
        max_chars: int = DEFAULT_MAX_CHARS,
        min_chars: int = DEFAULT_MIN_CHARS,
    ) -> None:
        """
        Initialize chunking task.

        Args:
            max_chars: Upper bound that triggers a flush
            min_chars: Buffered size required before a flush is allowed

        Raises:
            ValueError: When min_chars exceeds max_chars
        """
        if min_chars > max_chars:
            raise ValueError("min_chars cannot exceed max_chars")
        self._max_chars = max_chars
        self._min_chars = min_chars

    def chunk(self, pages: list[PageText]) -> list[Chunk]:
        """
        Chunk pages, never returning an empty list.

        A document without extractable text yields one placeholder chunk
        spanning its first to last page, so it stays usable for chat.

        Args:
            pages: Page texts in document order

        Returns:
            list[Chunk]: At least one chunk
        """
        chunks = hybrid_chunk(pages, self._max_chars, self._min_chars)
        if chunks:
            return chunks

        combined = "\n".join(page.text for page in pages).strip()
        first_page = pages[0].page_number if pages else 1
        last_page = pages[-1].page_number if pages else 1
        return [
            Chunk(
                content=combined or EMPTY_DOCUMENT_TEXT,
                page_start=first_page,
                page_end=last_page,
                chunk_index=0,
            )
        ]
