"""
Model provider factories.

Builds the LangChain chat model and embeddings client from settings.
Returns None when no API key is configured so callers can degrade
(hash embeddings, ModelUnavailableError for chat).

Dependencies: langchain_google_genai, docchat.configs
System role: Model provider construction
"""

import logging

from langchain_core.embeddings import Embeddings
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_google_genai import ChatGoogleGenerativeAI

from docchat.boundary.llm.embeddings_wrapper import FixedDimensionEmbeddings
from docchat.configs import LLMSettings

logger = logging.getLogger(__name__)


def build_embeddings(settings: LLMSettings) -> Embeddings | None:
    """
    Create the embedding provider.

    Args:
        settings: LLM settings

    Returns:
        Embeddings client, or None when LLM_GOOGLE_API_KEY is not set
    """
    if not settings.google_api_key:
        logger.warning(f"{__name__}:build_embeddings - No API key, using fallback embeddings")
        return None
    return FixedDimensionEmbeddings(
        model=settings.embedding_model,
        output_dimensionality=settings.embedding_dim,
        google_api_key=settings.google_api_key,
    )


def build_chat_model(settings: LLMSettings) -> BaseChatModel | None:
    """
    Create the streaming chat model.

    Args:
        settings: LLM settings

    Returns:
        Chat model, or None when LLM_GOOGLE_API_KEY is not set
    """
    if not settings.google_api_key:
        logger.warning(f"{__name__}:build_chat_model - No API key, chat is disabled")
        return None
    return ChatGoogleGenerativeAI(
        model=settings.chat_model,
        temperature=settings.temperature,
        google_api_key=settings.google_api_key,
    )
