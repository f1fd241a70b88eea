"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from docchat.configs.base import BaseSettings
from docchat.configs.database import DatabaseSettings
from docchat.configs.ingestion import IngestionSettings
from docchat.configs.llm import LLMSettings
from docchat.configs.upload import UploadSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    # Aggregated settings
    database: DatabaseSettings = DatabaseSettings()
    upload: UploadSettings = UploadSettings()
    ingestion: IngestionSettings = IngestionSettings()
    llm: LLMSettings = LLMSettings()


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from docchat.configs import get_settings
        settings = get_settings()
    """
    return Settings()
