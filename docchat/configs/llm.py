"""
LLM provider configuration settings.

Google Generative AI models for chat completion and embeddings,
plus retrieval defaults.

Dependencies: pydantic, pydantic_settings
System role: Model provider configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from docchat.configs.base import BaseSettings


class LLMSettings(BaseSettings):
    """Chat model, embedding model and retrieval configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LLM_",
        case_sensitive=False,
        extra="ignore",
    )

    google_api_key: str = Field(
        default="",
        description="Google AI API key; empty disables both providers",
    )
    chat_model: str = Field(
        default="gemini-2.5-flash",
        description="Chat model used for answer streaming",
    )
    temperature: float = Field(default=0.2, ge=0.0, le=2.0)
    embedding_model: str = Field(
        default="models/gemini-embedding-001",
        description="Embedding model (supports reduced output dimensionality)",
    )
    embedding_dim: int = Field(
        default=1536,
        gt=0,
        description="Fixed dimensionality of every stored vector",
    )
    provider_attempts: int = Field(
        default=3,
        ge=1,
        description="Attempts per provider call before falling back",
    )
    default_top_k: int = Field(default=5, ge=1)
    max_top_k: int = Field(default=10, ge=1)
