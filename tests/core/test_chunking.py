"""
Test suite for hybrid paragraph-aware chunking.

System role: Verification of the second ingestion stage
"""

import pytest

from docchat.core.document_processing.models import PageText
from docchat.core.document_processing.tasks.chunking_task import (
    EMPTY_DOCUMENT_TEXT,
    ChunkingTask,
    hybrid_chunk,
    split_paragraphs,
)


def paragraph(length: int, letter: str = "a") -> str:
    return letter * length


class TestSplitParagraphs:
    """Blank-line paragraph splitting."""

    def test_split_paragraphs_should_split_on_blank_lines(self) -> None:
        text = "first line\nstill first\n\nsecond\n\n\n\nthird"

        assert split_paragraphs(text) == ["first line\nstill first", "second", "third"]

    def test_split_paragraphs_should_drop_whitespace_only_parts(self) -> None:
        assert split_paragraphs("  \n\n \n\n") == []


class TestHybridChunk:
    """Two-threshold flush rule."""

    def test_three_pages_should_break_before_paragraph_that_crosses_upper_bound(self) -> None:
        # Arrange: 650 buffered chars, next paragraph would push it to 1502
        pages = [
            PageText(page_number=1, text=paragraph(650, "a")),
            PageText(page_number=2, text=paragraph(850, "b")),
            PageText(page_number=3, text=paragraph(300, "c")),
        ]

        # Act
        chunks = hybrid_chunk(pages)

        # Assert
        assert len(chunks) == 2
        assert chunks[0].content == paragraph(650, "a")
        assert (chunks[0].page_start, chunks[0].page_end) == (1, 1)
        assert chunks[1].content.startswith(paragraph(850, "b"))
        assert chunks[1].content == paragraph(850, "b") + "\n\n" + paragraph(300, "c")
        assert (chunks[1].page_start, chunks[1].page_end) == (2, 3)
        assert [c.chunk_index for c in chunks] == [0, 1]

    def test_small_buffer_should_grow_past_upper_bound(self) -> None:
        # Below the lower bound no flush happens even when the upper bound is crossed
        pages = [PageText(page_number=1, text=f"{paragraph(500)}\n\n{paragraph(1000, 'b')}")]

        chunks = hybrid_chunk(pages)

        assert len(chunks) == 1
        assert len(chunks[0].content) == 1502

    def test_chunks_should_stay_within_upper_bound_for_small_paragraphs(self) -> None:
        text = "\n\n".join(paragraph(200, letter) for letter in "abcdefghijklmnop")
        pages = [PageText(page_number=1, text=text)]

        chunks = hybrid_chunk(pages)

        assert all(len(c.content) <= 1400 for c in chunks)
        assert "".join(c.content.replace("\n\n", "") for c in chunks) == text.replace("\n\n", "")

    def test_single_oversized_paragraph_should_be_its_own_chunk(self) -> None:
        pages = [
            PageText(page_number=1, text=paragraph(700)),
            PageText(page_number=2, text=paragraph(3000, "z")),
        ]

        chunks = hybrid_chunk(pages)

        assert [len(c.content) for c in chunks] == [700, 3000]
        assert (chunks[1].page_start, chunks[1].page_end) == (2, 2)

    def test_remainder_should_be_flushed(self) -> None:
        pages = [PageText(page_number=1, text="short paragraph")]

        chunks = hybrid_chunk(pages)

        assert [c.content for c in chunks] == ["short paragraph"]

    def test_empty_pages_should_not_open_page_range(self) -> None:
        pages = [
            PageText(page_number=1, text=""),
            PageText(page_number=2, text="content on page two"),
        ]

        chunks = hybrid_chunk(pages)

        assert (chunks[0].page_start, chunks[0].page_end) == (2, 2)

    def test_no_pages_should_yield_no_chunks(self) -> None:
        assert hybrid_chunk([]) == []


class TestChunkingTask:
    """ChunkingTask never returns an empty list."""

    def test_chunk_should_emit_placeholder_for_document_without_text(self) -> None:
        pages = [PageText(page_number=1, text=""), PageText(page_number=2, text="  ")]

        chunks = ChunkingTask().chunk(pages)

        assert len(chunks) == 1
        assert chunks[0].content == EMPTY_DOCUMENT_TEXT
        assert (chunks[0].page_start, chunks[0].page_end) == (1, 2)

    def test_chunk_should_emit_placeholder_for_zero_pages(self) -> None:
        chunks = ChunkingTask().chunk([])

        assert chunks[0].content == EMPTY_DOCUMENT_TEXT
        assert (chunks[0].page_start, chunks[0].page_end) == (1, 1)

    def test_chunk_should_respect_custom_bounds(self) -> None:
        pages = [PageText(page_number=1, text="\n\n".join(paragraph(60, l) for l in "abcd"))]

        chunks = ChunkingTask(max_chars=130, min_chars=60).chunk(pages)

        assert len(chunks) == 2

    def test_init_should_reject_inverted_bounds(self) -> None:
        with pytest.raises(ValueError):
            ChunkingTask(max_chars=100, min_chars=200)
