"""
Layout-aware PDF text extraction using pypdf.

Collects positioned text fragments per page and rebuilds reading order:
fragments are grouped into rows by vertical position (within a small
tolerance), rows are ordered top-to-bottom and fragments left-to-right.

Dependencies: pypdf
System role: First stage of document ingestion pipeline
"""

import logging
from pathlib import Path
from typing import Iterable, Sequence

from pypdf import PdfReader
from pypdf.errors import PyPdfError

from docchat.core.exceptions import ExtractionError

from ..models import PageText, TextFragment

logger = logging.getLogger(__name__)

DEFAULT_ROW_TOLERANCE = 2.0


def fragment_position(cm: Sequence[float], tm: Sequence[float]) -> tuple[float, float]:
    """
    Page coordinates of a text run.

    The run origin is the translation part of tm x cm (text matrix applied
    inside the current transformation matrix).

    Args:
        cm: Current transformation matrix [a, b, c, d, e, f]
        tm: Text matrix [a, b, c, d, e, f]

    Returns:
        (x, y) in PDF user space (y grows upwards)
    """
    x = cm[0] * tm[4] + cm[2] * tm[5] + cm[4]
    y = cm[1] * tm[4] + cm[3] * tm[5] + cm[5]
    return x, y


def group_fragments(
    fragments: Iterable[TextFragment],
    tolerance: float = DEFAULT_ROW_TOLERANCE,
) -> str:
    """
    Rebuild reading order from an unordered set of fragments.

    Each fragment joins the first existing row whose y is within
    tolerance of its own, otherwise it opens a new row at its y. Rows are
    emitted by descending y, fragments within a row by ascending x. Entries
    are stripped, empty ones dropped, and empty rows skipped.

    Args:
        fragments: Positioned text runs of one page
        tolerance: Maximum vertical distance for two runs to share a row

    Returns:
        str: Rows joined with single spaces inside and newlines between
    """
    rows: list[tuple[float, list[TextFragment]]] = []
    for fragment in fragments:
        for row_y, entries in rows:
            if abs(row_y - fragment.y) <= tolerance:
                entries.append(fragment)
                break
        else:
            rows.append((fragment.y, [fragment]))

    # sorted() is stable, so equal coordinates keep arrival order
    lines: list[str] = []
    for _, entries in sorted(rows, key=lambda row: -row[0]):
        parts = [entry.text.strip() for entry in sorted(entries, key=lambda e: e.x)]
        line = " ".join(part for part in parts if part)
        if line:
            lines.append(line)
    return "\n".join(lines)


class ParsingTask:
    """Extract page texts from a PDF file."""

    def __init__(self, row_tolerance: float = DEFAULT_ROW_TOLERANCE) -> None:
        """
        Initialize parsing task.

        Args:
            row_tolerance: Vertical tolerance used when grouping fragments into rows
        """
        self._row_tolerance = row_tolerance

    def collect_fragments(self, page) -> list[TextFragment]:
        """
        Positioned text runs of one pypdf page.

        Args:
            page: pypdf PageObject

        Returns:
            list[TextFragment]: Runs in content-stream order
        """
        fragments: list[TextFragment] = []

        def visitor(text, cm, tm, font_dict, font_size) -> None:
            if not text:
                return
            x, y = fragment_position(cm, tm)
            fragments.append(TextFragment(text=text, x=x, y=y))

        page.extract_text(visitor_text=visitor)
        return fragments

    def parse(self, file_path: str | Path) -> list[PageText]:
        """
        Extract the reconstructed text of every page.

        Args:
            file_path: Path to a PDF document

        Returns:
            list[PageText]: One entry per page, 1-based page numbers

        Raises:
            ExtractionError: When the file is missing or cannot be read as a PDF
        """
        path = Path(file_path)
        if not path.is_file():
            raise ExtractionError(f"File not found: {file_path}")

        try:
            reader = PdfReader(str(path))
            pages = [
                PageText(
                    page_number=number,
                    text=group_fragments(self.collect_fragments(page), self._row_tolerance),
                )
                for number, page in enumerate(reader.pages, start=1)
            ]
        except (PyPdfError, ValueError, KeyError, TypeError) as e:
            raise ExtractionError(f"Failed to parse PDF: {e}") from e

        logger.info(
            f"{__name__}:parse - Extracted {len(pages)} pages "
            f"({sum(len(p.text) for p in pages)} chars) from {path.name}"
        )
        return pages
