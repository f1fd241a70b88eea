"""
Configuration management module.

Provides centralized, type-safe configuration using Pydantic Settings.
All config modules support environment variable mapping with validation.
"""

from docchat.configs.database import DatabaseSettings
from docchat.configs.ingestion import IngestionSettings
from docchat.configs.llm import LLMSettings
from docchat.configs.settings import Settings, get_settings
from docchat.configs.upload import UploadSettings

__all__ = [
    "DatabaseSettings",
    "IngestionSettings",
    "LLMSettings",
    "Settings",
    "UploadSettings",
    "get_settings",
]
