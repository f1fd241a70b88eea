"""
Ingestion configuration settings.

Chunking thresholds, layout grouping tolerance and document retention.

Dependencies: pydantic, pydantic_settings
System role: Document processing configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from docchat.configs.base import BaseSettings


class IngestionSettings(BaseSettings):
    """Text extraction and chunking configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="INGESTION_",
        case_sensitive=False,
        extra="ignore",
    )

    chunk_max_chars: int = Field(
        default=1400,
        gt=0,
        description="Upper bound for a chunk before a flush is considered",
    )
    chunk_min_chars: int = Field(
        default=600,
        ge=0,
        description="Minimum buffered characters required before flushing",
    )
    row_tolerance: float = Field(
        default=2.0,
        ge=0,
        description="Vertical tolerance when grouping text fragments into rows",
    )
    retention_hours: float = Field(
        default=24.0,
        gt=0,
        description="Age after which the cleanup routine purges documents",
    )
