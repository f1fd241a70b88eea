"""
On-disk storage for resumable uploads.

Partial uploads live in temp_dir keyed by (document_id, nonce); finalized
files live in files_dir keyed by (document_id, sanitized filename).

Dependencies: aiofiles
System role: Upload byte storage boundary
"""

import asyncio
import glob
import logging
import re
from pathlib import Path
from uuid import UUID

import aiofiles
import aiofiles.os

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9._-]")


def sanitize_filename(filename: str | None, document_id: UUID) -> str:
    """
    Make a client filename safe for use inside a path.

    Args:
        filename: Name supplied by the client (may be empty)
        document_id: Used for the fallback name

    Returns:
        str: Filename restricted to [a-zA-Z0-9._-]
    """
    if filename:
        return _UNSAFE_FILENAME_CHARS.sub("_", filename)
    return f"doc-{document_id}.bin"


class UploadStorage:
    """Async file operations for the upload protocol."""

    def __init__(self, temp_dir: Path, files_dir: Path) -> None:
        self.temp_dir = Path(temp_dir)
        self.files_dir = Path(files_dir)

    async def ensure_dirs(self) -> None:
        """Create the upload directories if missing."""
        await aiofiles.os.makedirs(self.temp_dir, exist_ok=True)
        await aiofiles.os.makedirs(self.files_dir, exist_ok=True)

    def temp_path(self, document_id: UUID, nonce: str) -> Path:
        return self.temp_dir / f"{document_id}-{nonce}.part"

    def final_path(self, document_id: UUID, filename: str | None) -> Path:
        return self.files_dir / f"doc-{document_id}-{sanitize_filename(filename, document_id)}"

    async def append(self, document_id: UUID, nonce: str, data: bytes) -> int:
        """
        Append a byte range to the document's temp file.

        Args:
            document_id: Document being uploaded
            nonce: Ticket nonce
            data: Bytes to append

        Returns:
            int: Cumulative size of the temp file after the write
        """
        await self.ensure_dirs()
        path = self.temp_path(document_id, nonce)
        async with aiofiles.open(path, "ab") as out_file:
            await out_file.write(data)
        stat = await aiofiles.os.stat(path)
        return stat.st_size

    async def is_file(self, path: Path | str | None) -> bool:
        """Whether path names an existing regular file."""
        if not path:
            return False
        return await aiofiles.os.path.isfile(path)

    async def size(self, path: Path) -> int | None:
        """Size of a file in bytes, None if it does not exist."""
        try:
            stat = await aiofiles.os.stat(path)
        except FileNotFoundError:
            return None
        return stat.st_size

    async def promote(self, document_id: UUID, nonce: str, filename: str | None) -> tuple[Path, int]:
        """
        Atomically move the temp file to its final location.

        Any stale final file for the same id and name is replaced.

        Args:
            document_id: Document being finalized
            nonce: Ticket nonce
            filename: Client filename

        Returns:
            (final path, size in bytes)

        Raises:
            FileNotFoundError: If the temp file does not exist
        """
        await self.ensure_dirs()
        source = self.temp_path(document_id, nonce)
        destination = self.final_path(document_id, filename)
        await self.remove(destination)
        await aiofiles.os.replace(source, destination)
        stat = await aiofiles.os.stat(destination)
        logger.info(
            f"{__name__}:promote - Promoted upload document_id={document_id} "
            f"to {destination} ({stat.st_size} bytes)"
        )
        return destination, stat.st_size

    async def remove(self, path: Path | str) -> bool:
        """Remove a file if present. Returns True when something was removed."""
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            return False
        return True

    async def remove_temp(self, document_id: UUID, nonce: str) -> bool:
        return await self.remove(self.temp_path(document_id, nonce))

    async def remove_document_files(self, document_ids: list[UUID]) -> int:
        """
        Best-effort removal of every temp and final file of the given documents.

        Failures are logged and skipped.

        Returns:
            int: Number of files removed
        """
        patterns: list[str] = []
        for document_id in document_ids:
            patterns.append(str(self.temp_dir / f"{glob.escape(str(document_id))}-*.part"))
            patterns.append(str(self.files_dir / f"doc-{glob.escape(str(document_id))}-*"))

        matches = await asyncio.to_thread(
            lambda: [path for pattern in patterns for path in glob.glob(pattern)]
        )

        removed = 0
        for path in matches:
            try:
                if await self.remove(path):
                    removed += 1
            except OSError as e:
                logger.warning(f"{__name__}:remove_document_files - Could not remove {path}: {e}")
        logger.info(
            f"{__name__}:remove_document_files - Removed {removed} files "
            f"for {len(document_ids)} documents"
        )
        return removed
