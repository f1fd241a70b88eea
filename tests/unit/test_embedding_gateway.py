"""
Test suite for EmbeddingGateway and the hash fallback embedding.

System role: Verification of the text-to-vector boundary
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from langchain_core.embeddings import DeterministicFakeEmbedding

from docchat.core.embedding_gateway import (
    DEFAULT_EMBEDDING_DIM,
    EmbeddingGateway,
    hash_embedding,
    text_hash,
)


class TestTextHash:
    """Polynomial hash over UTF-16 code units."""

    def test_text_hash_should_match_known_values(self) -> None:
        assert text_hash("") == 0
        assert text_hash("a") == 97
        assert text_hash("ab") == 97 * 31 + 98

    def test_text_hash_should_use_surrogate_pairs_outside_bmp(self) -> None:
        # U+1F600 is 0xD83D 0xDE00 in UTF-16
        assert text_hash("\U0001F600") == 0xD83D * 31 + 0xDE00

    def test_text_hash_should_stay_within_32_bits(self) -> None:
        value = text_hash("x" * 10_000)

        assert 0 <= value <= 0xFFFFFFFF


class TestHashEmbedding:
    """Deterministic fallback vectors."""

    def test_hash_embedding_should_follow_coordinate_formula(self) -> None:
        assert hash_embedding("a", dim=3) == [0.097, 0.194, 0.291]

    def test_hash_embedding_should_be_deterministic(self) -> None:
        assert hash_embedding("same text") == hash_embedding("same text")

    def test_hash_embedding_should_have_default_dimension(self) -> None:
        vector = hash_embedding("text")

        assert len(vector) == DEFAULT_EMBEDDING_DIM
        assert all(0.0 <= v < 1.0 for v in vector)

    def test_hash_embedding_should_differ_for_different_text(self) -> None:
        assert hash_embedding("alpha") != hash_embedding("beta")


class TestEmbeddingGateway:
    """Provider path and whole-batch fallback."""

    @pytest.mark.asyncio
    async def test_embed_batch_should_use_provider_when_it_succeeds(self) -> None:
        # Arrange
        provider = DeterministicFakeEmbedding(size=8)
        gateway = EmbeddingGateway(provider, dim=8, attempts=1)

        # Act
        batch = await gateway.embed_batch(["one", "two", "three"])

        # Assert
        assert batch.used_fallback is False
        assert len(batch.vectors) == 3
        assert batch.vectors[0] == provider.embed_query("one")

    @pytest.mark.asyncio
    async def test_embed_batch_should_fall_back_without_provider(self) -> None:
        gateway = EmbeddingGateway(None, dim=16)

        batch = await gateway.embed_batch(["one", "two"])

        assert batch.used_fallback is True
        assert batch.vectors == [hash_embedding("one", 16), hash_embedding("two", 16)]

    @pytest.mark.asyncio
    async def test_embed_batch_should_fall_back_for_whole_batch_on_provider_error(self) -> None:
        # Arrange
        provider = MagicMock()
        provider.aembed_documents = AsyncMock(side_effect=RuntimeError("quota"))
        gateway = EmbeddingGateway(provider, dim=4, attempts=2)

        # Act
        batch = await gateway.embed_batch(["a", "b"])

        # Assert
        assert batch.used_fallback is True
        assert batch.vectors == [hash_embedding("a", 4), hash_embedding("b", 4)]
        assert provider.aembed_documents.await_count == 2

    @pytest.mark.asyncio
    async def test_embed_batch_should_fall_back_on_count_mismatch(self) -> None:
        provider = MagicMock()
        provider.aembed_documents = AsyncMock(return_value=[[0.1] * 4])
        gateway = EmbeddingGateway(provider, dim=4, attempts=1)

        batch = await gateway.embed_batch(["a", "b"])

        assert batch.used_fallback is True
        assert len(batch.vectors) == 2

    @pytest.mark.asyncio
    async def test_embed_batch_should_fall_back_on_dimension_mismatch(self) -> None:
        provider = DeterministicFakeEmbedding(size=3)
        gateway = EmbeddingGateway(provider, dim=4, attempts=1)

        batch = await gateway.embed_batch(["a"])

        assert batch.used_fallback is True
        assert batch.vectors == [hash_embedding("a", 4)]

    @pytest.mark.asyncio
    async def test_embed_batch_should_return_empty_for_no_texts(self) -> None:
        provider = MagicMock()
        provider.aembed_documents = AsyncMock()
        gateway = EmbeddingGateway(provider, dim=4)

        batch = await gateway.embed_batch([])

        assert batch.vectors == []
        provider.aembed_documents.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_embed_query_should_match_batch_path(self) -> None:
        gateway = EmbeddingGateway(None, dim=8)

        vector = await gateway.embed_query("question")

        assert vector == hash_embedding("question", 8)
