"""
Embedding gateway with deterministic fallback.

Embeds a batch of texts with the configured provider in one call. On any
failure (no provider, provider error, count or dimension mismatch) the
whole batch is embedded with a hash-derived vector instead, so provider
and fallback vectors are never mixed within a batch.

Dependencies: langchain_core, tenacity
System role: Text-to-vector boundary for ingestion and retrieval
"""

import logging

from langchain_core.embeddings import Embeddings
from pydantic import BaseModel
from tenacity import AsyncRetrying, stop_after_attempt, wait_exponential_jitter

from docchat.core.exceptions import EmbeddingError

logger = logging.getLogger(__name__)

DEFAULT_EMBEDDING_DIM = 1536
_UINT32 = 0xFFFFFFFF


def text_hash(text: str) -> int:
    """
    Polynomial rolling hash (base 31) over UTF-16 code units, kept in 32 bits.

    Characters outside the BMP contribute their two surrogate units, so
    the value is identical to hashing the JavaScript string form of text.
    """
    encoded = text.encode("utf-16-le", "surrogatepass")
    value = 0
    for i in range(0, len(encoded), 2):
        unit = encoded[i] | (encoded[i + 1] << 8)
        value = (value * 31 + unit) & _UINT32
    return value


def hash_embedding(text: str, dim: int = DEFAULT_EMBEDDING_DIM) -> list[float]:
    """
    Deterministic non-semantic vector for text.

    Coordinate i is ((hash + i * 97) mod 1000) / 1000.

    Args:
        text: Input text
        dim: Vector dimensionality

    Returns:
        list[float]: dim values in [0, 1)
    """
    value = text_hash(text)
    return [((value + i * 97) % 1000) / 1000 for i in range(dim)]


class EmbeddingBatch(BaseModel):
    """Vectors for one batch plus where they came from."""

    vectors: list[list[float]]
    used_fallback: bool


class EmbeddingGateway:
    """
    Length- and order-preserving batch embedding.

    Embedding-provider failures are recovered here and never surface as
    document failures.
    """

    def __init__(
        self,
        provider: Embeddings | None,
        dim: int = DEFAULT_EMBEDDING_DIM,
        attempts: int = 3,
    ) -> None:
        """
        Args:
            provider: LangChain embeddings client, None to always use the fallback
            dim: Required vector dimensionality
            attempts: Provider attempts (tenacity) before falling back
        """
        self._provider = provider
        self._dim = dim
        self._attempts = attempts

    @property
    def dim(self) -> int:
        return self._dim

    async def _call_provider(self, texts: list[str]) -> list[list[float]]:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self._attempts),
            wait=wait_exponential_jitter(initial=0.5, max=8, jitter=1),
            before_sleep=lambda retry_state: logger.warning(
                f"{__name__}:_call_provider - Retry {retry_state.attempt_number}/{self._attempts}"
            ),
            reraise=True,
        ):
            with attempt:
                vectors = await self._provider.aembed_documents(texts)
        return vectors

    def _validate(self, texts: list[str], vectors: list[list[float]]) -> None:
        if len(vectors) != len(texts):
            raise EmbeddingError(
                f"Provider returned {len(vectors)} vectors for {len(texts)} texts"
            )
        for vector in vectors:
            if len(vector) != self._dim:
                raise EmbeddingError(
                    f"Provider returned dimension {len(vector)}, expected {self._dim}"
                )

    async def embed_batch(self, texts: list[str]) -> EmbeddingBatch:
        """
        Embed texts, reporting whether the fallback was used.

        Args:
            texts: Texts to embed

        Returns:
            EmbeddingBatch: One vector per input text, in input order
        """
        if not texts:
            return EmbeddingBatch(vectors=[], used_fallback=False)

        if self._provider is not None:
            try:
                vectors = await self._call_provider(texts)
                self._validate(texts, vectors)
                return EmbeddingBatch(
                    vectors=[[float(v) for v in vector] for vector in vectors],
                    used_fallback=False,
                )
            except Exception as e:
                logger.warning(
                    f"{__name__}:embed_batch - Provider failed for {len(texts)} texts, "
                    f"using fallback: {type(e).__name__}: {e}"
                )

        return EmbeddingBatch(
            vectors=[hash_embedding(text, self._dim) for text in texts],
            used_fallback=True,
        )

    async def embed(self, texts: list[str]) -> list[list[float]]:
        """Embed texts; see embed_batch."""
        return (await self.embed_batch(texts)).vectors

    async def embed_query(self, text: str) -> list[float]:
        """Embed a single question with the same path used for chunks."""
        vectors = await self.embed([text])
        return vectors[0]
