"""
Test suite for layout-aware PDF extraction.

System role: Verification of the first ingestion stage
"""

import pytest

from docchat.core.document_processing.models import TextFragment
from docchat.core.document_processing.tasks.parsing_task import (
    ParsingTask,
    fragment_position,
    group_fragments,
)
from docchat.core.exceptions import ExtractionError

IDENTITY = [1.0, 0.0, 0.0, 1.0, 0.0, 0.0]


def frag(text: str, x: float, y: float) -> TextFragment:
    return TextFragment(text=text, x=x, y=y)


class TestFragmentPosition:
    """Run origin from cm and tm."""

    def test_identity_cm_should_return_tm_translation(self) -> None:
        assert fragment_position(IDENTITY, [1, 0, 0, 1, 72, 700]) == (72, 700)

    def test_cm_should_scale_and_translate(self) -> None:
        cm = [2.0, 0.0, 0.0, 2.0, 10.0, 20.0]

        assert fragment_position(cm, [1, 0, 0, 1, 5, 7]) == (20.0, 34.0)


class TestGroupFragments:
    """Row grouping and reading order."""

    def test_rows_should_be_ordered_top_to_bottom(self) -> None:
        fragments = [frag("bottom", 72, 100), frag("top", 72, 700), frag("middle", 72, 400)]

        assert group_fragments(fragments) == "top\nmiddle\nbottom"

    def test_fragments_within_row_should_be_ordered_left_to_right(self) -> None:
        fragments = [frag("world", 200, 500), frag("hello", 72, 500)]

        assert group_fragments(fragments) == "hello world"

    def test_fragments_within_tolerance_should_share_a_row(self) -> None:
        fragments = [frag("a", 10, 500), frag("b", 20, 501.5), frag("c", 30, 497)]

        # c sits 3 units below the row opened by a
        assert group_fragments(fragments, tolerance=2.0) == "a b\nc"

    def test_whitespace_entries_and_empty_rows_should_be_dropped(self) -> None:
        fragments = [frag("  ", 10, 600), frag(" text ", 10, 500), frag("\n", 50, 500)]

        assert group_fragments(fragments) == "text"

    def test_no_fragments_should_give_empty_text(self) -> None:
        assert group_fragments([]) == ""


class TestParsingTask:
    """pypdf-backed page extraction."""

    def test_parse_should_return_one_entry_per_page(self, temp_dir, sample_pdf) -> None:
        path = temp_dir / "sample.pdf"
        path.write_bytes(sample_pdf)

        pages = ParsingTask().parse(path)

        assert [page.page_number for page in pages] == [1, 2]
        assert "Photosynthesis" in pages[0].text
        assert "Respiration" in pages[1].text
        assert "Respiration" not in pages[0].text

    def test_parse_should_keep_heading_above_body(self, temp_dir, sample_pdf) -> None:
        path = temp_dir / "sample.pdf"
        path.write_bytes(sample_pdf)

        text = ParsingTask().parse(path)[0].text

        assert text.index("Photosynthesis") < text.index("chemical")

    def test_blank_page_should_give_empty_text(self, temp_dir, pdf_factory) -> None:
        path = temp_dir / "blank.pdf"
        path.write_bytes(pdf_factory([[]]))

        pages = ParsingTask().parse(path)

        assert len(pages) == 1
        assert pages[0].text == ""

    def test_missing_file_should_raise_extraction_error(self, temp_dir) -> None:
        with pytest.raises(ExtractionError):
            ParsingTask().parse(temp_dir / "missing.pdf")

    def test_non_pdf_bytes_should_raise_extraction_error(self, temp_dir) -> None:
        path = temp_dir / "garbage.pdf"
        path.write_bytes(b"this is not a pdf at all")

        with pytest.raises(ExtractionError):
            ParsingTask().parse(path)
