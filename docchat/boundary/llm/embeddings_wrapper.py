"""
Google Generative AI Embeddings wrapper with fixed output dimensionality.

Wraps GoogleGenerativeAIEmbeddings so every embed call, sync or async,
requests the same vector size. The base class ignores
output_dimensionality given to the constructor.

Dependencies: langchain_google_genai
System role: Embedding dimension consistency for stored chunk vectors
"""

import logging

from langchain_google_genai import GoogleGenerativeAIEmbeddings

logger = logging.getLogger(__name__)


class FixedDimensionEmbeddings(GoogleGenerativeAIEmbeddings):
    """GoogleGenerativeAIEmbeddings pinned to one output dimensionality."""

    _output_dimensionality: int = 1536

    def __init__(
        self,
        model: str = "models/gemini-embedding-001",
        output_dimensionality: int = 1536,
        **kwargs,
    ) -> None:
        """
        Initialize embeddings with fixed output dimensionality.

        Args:
            model: Google embedding model ID (gemini-embedding-001 supports 768/1536/3072)
            output_dimensionality: Fixed dimension for all embeddings
            **kwargs: Additional arguments for GoogleGenerativeAIEmbeddings (google_api_key, ...)
        """
        super().__init__(model=model, **kwargs)
        self._output_dimensionality = output_dimensionality
        logger.info(
            f"{__name__}:__init__ - Initialized with model={model}, "
            f"output_dimensionality={output_dimensionality}"
        )

    def embed_documents(self, texts: list[str], **kwargs) -> list[list[float]]:
        kwargs.setdefault("output_dimensionality", self._output_dimensionality)
        return super().embed_documents(texts, **kwargs)

    def embed_query(self, text: str, **kwargs) -> list[float]:
        kwargs.setdefault("output_dimensionality", self._output_dimensionality)
        return super().embed_query(text, **kwargs)

    async def aembed_documents(self, texts: list[str], **kwargs) -> list[list[float]]:
        kwargs.setdefault("output_dimensionality", self._output_dimensionality)
        return await super().aembed_documents(texts, **kwargs)

    async def aembed_query(self, text: str, **kwargs) -> list[float]:
        kwargs.setdefault("output_dimensionality", self._output_dimensionality)
        return await super().aembed_query(text, **kwargs)
