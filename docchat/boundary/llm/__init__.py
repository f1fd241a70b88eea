"""LLM and embedding provider adapters."""

from docchat.boundary.llm.embeddings_wrapper import FixedDimensionEmbeddings
from docchat.boundary.llm.providers import build_chat_model, build_embeddings

__all__ = ["FixedDimensionEmbeddings", "build_chat_model", "build_embeddings"]
