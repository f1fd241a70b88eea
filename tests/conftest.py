"""
Shared test fixtures and configuration for entire test suite.

Provides: in-memory async database, session factory, upload storage in a
temp directory, a minimal PDF builder, sample identifiers
Dependencies: pytest, pytest-asyncio, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import shutil
import tempfile
import uuid
from pathlib import Path

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from docchat.boundary.db import models  # noqa: F401
from docchat.boundary.db.base import Base
from docchat.boundary.storage import UploadStorage


def _escape_pdf_text(text: str) -> str:
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def build_pdf(pages: list[list[str]]) -> bytes:
    """
    Build a small valid PDF.

    Each page is a list of text lines drawn top to bottom in Helvetica.
    A page with no lines has an empty content stream.
    """
    page_count = len(pages)
    page_ids = [4 + 2 * i for i in range(page_count)]
    objects: list[bytes] = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        (
            "<< /Type /Pages /Kids ["
            + " ".join(f"{pid} 0 R" for pid in page_ids)
            + f"] /Count {page_count} >>"
        ).encode("ascii"),
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    for index, lines in enumerate(pages):
        content_id = page_ids[index] + 1
        objects.append(
            (
                "<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
                "/Resources << /Font << /F1 3 0 R >> >> "
                f"/Contents {content_id} 0 R >>"
            ).encode("ascii")
        )
        stream = "\n".join(
            f"BT /F1 12 Tf 72 {720 - 20 * row} Td ({_escape_pdf_text(line)}) Tj ET"
            for row, line in enumerate(lines)
        ).encode("latin-1")
        objects.append(
            f"<< /Length {len(stream)} >>\nstream\n".encode("ascii") + stream + b"\nendstream"
        )

    output = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(output))
        output += f"{number} 0 obj\n".encode("ascii") + body + b"\nendobj\n"

    xref_offset = len(output)
    output += f"xref\n0 {len(objects) + 1}\n".encode("ascii")
    output += b"0000000000 65535 f \n"
    for offset in offsets:
        output += f"{offset:010d} 00000 n \n".encode("ascii")
    output += (
        f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\n"
        f"startxref\n{xref_offset}\n%%EOF\n"
    ).encode("ascii")
    return bytes(output)


@pytest.fixture
async def engine():
    """
    In-memory SQLite async engine with all tables created.

    StaticPool keeps one connection so every session sees the same database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(engine, class_=AsyncSession, autoflush=False, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    """
    Async database session for one test.

    Yields:
        AsyncSession: Test database session, rolled back afterwards
    """
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def temp_dir():
    """
    Create a temporary directory for test files.

    Yields:
        Path: Path to temporary directory
    """
    temp_path = Path(tempfile.mkdtemp(prefix="docchat_test_"))
    yield temp_path

    if temp_path.exists():
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def storage(temp_dir: Path) -> UploadStorage:
    """Upload storage rooted in the temp directory."""
    return UploadStorage(temp_dir / "uploads", temp_dir / "files")


@pytest.fixture
def pdf_factory():
    """Expose build_pdf to tests."""
    return build_pdf


@pytest.fixture
def sample_pdf() -> bytes:
    """Two-page PDF with a heading and a sentence per page."""
    return build_pdf([
        ["Photosynthesis", "Plants convert light into chemical energy."],
        ["Respiration", "Cells release energy from glucose."],
    ])


@pytest.fixture
def session_id() -> uuid.UUID:
    """Generate a test session ID."""
    return uuid.uuid4()
