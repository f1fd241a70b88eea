"""File storage boundary for uploaded documents."""

from docchat.boundary.storage.upload_storage import UploadStorage, sanitize_filename

__all__ = ["UploadStorage", "sanitize_filename"]
