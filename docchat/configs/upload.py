"""
Upload protocol configuration settings.

Controls ticket signing, ticket lifetime, the hard size cap and the
on-disk locations used for in-flight and finalized uploads.

Dependencies: pydantic, pydantic_settings
System role: Upload transfer configuration
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from docchat.configs.base import BaseSettings

MAX_UPLOAD_BYTES = 50 * 1024 * 1024


class UploadSettings(BaseSettings):
    """Resumable upload configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="UPLOAD_",
        case_sensitive=False,
        extra="ignore",
    )

    secret: str = Field(
        default="dev-upload-secret",
        description="HMAC secret used to sign upload tickets",
    )
    token_ttl_seconds: int = Field(
        default=3600,
        gt=0,
        description="Lifetime of an upload ticket in seconds",
    )
    max_bytes: int = Field(
        default=MAX_UPLOAD_BYTES,
        gt=0,
        description="Hard cap on the cumulative size of one upload",
    )
    temp_dir: Path = Field(
        default=Path("tmp/uploads"),
        description="Directory holding partial uploads",
    )
    files_dir: Path = Field(
        default=Path("tmp/files"),
        description="Directory holding finalized uploads",
    )
