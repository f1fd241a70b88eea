"""
Top-K chunk retrieval scoped to one document.

Loads the chunks of a (document, session) pair in storage order and ranks
them by cosine distance to the query vector. Ranking uses a stable sort,
so equal distances keep storage order and identical queries always
return the same list.

Dependencies: numpy, sqlalchemy, docchat.boundary.db
System role: RAG retrieval business logic
"""

import logging
from uuid import UUID

import numpy as np
from sqlalchemy.ext.asyncio import AsyncSession

from docchat.boundary.db.CRUD.chunk_crud import chunk_crud
from docchat.models.citation import Citation

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 5
MAX_TOP_K = 10


def clamp_top_k(top_k: int | None, default: int = DEFAULT_TOP_K, ceiling: int = MAX_TOP_K) -> int:
    """
    Normalize a requested top_k.

    Missing or non-positive values use the default; large values are capped.
    """
    if not top_k or top_k < 1:
        top_k = default
    return min(top_k, ceiling)


def cosine_distances(matrix: np.ndarray, query: np.ndarray) -> np.ndarray:
    """
    Cosine distance (1 - cosine similarity) of every row to query.

    Rows or queries with zero norm get distance 1.0.
    """
    row_norms = np.linalg.norm(matrix, axis=1)
    query_norm = np.linalg.norm(query)
    denominator = row_norms * query_norm
    similarity = np.divide(
        matrix @ query,
        denominator,
        out=np.zeros(len(matrix), dtype=float),
        where=denominator > 0,
    )
    return 1.0 - similarity


class Retriever:
    """Retrieval business logic."""

    def __init__(self, default_top_k: int = DEFAULT_TOP_K, max_top_k: int = MAX_TOP_K) -> None:
        self._default_top_k = default_top_k
        self._max_top_k = max_top_k

    async def search(
        self,
        db: AsyncSession,
        document_id: UUID,
        session_id: UUID,
        query_vector: list[float],
        top_k: int | None = None,
    ) -> list[Citation]:
        """
        Rank a document's chunks against a query vector.

        Args:
            db: Async database session
            document_id: Document to search (the session's active document)
            session_id: Session that must own the document
            query_vector: Embedded question
            top_k: Requested result count (clamped)

        Returns:
            list[Citation]: Ascending distance, ranks from 1. Empty when the
            document has no chunks (or does not belong to session_id).
        """
        k = clamp_top_k(top_k, self._default_top_k, self._max_top_k)
        chunks = await chunk_crud.get_for_document_in_session(db, document_id, session_id)
        if not chunks:
            logger.info(
                f"{__name__}:search - No chunks for document_id={document_id} session_id={session_id}"
            )
            return []

        query = np.asarray(query_vector, dtype=float)
        compatible = [chunk for chunk in chunks if len(chunk.embedding) == len(query)]
        if len(compatible) != len(chunks):
            logger.warning(
                f"{__name__}:search - Skipped {len(chunks) - len(compatible)} chunks "
                f"with mismatched dimension for document_id={document_id}"
            )
        if not compatible:
            return []

        matrix = np.asarray([chunk.embedding for chunk in compatible], dtype=float)
        distances = cosine_distances(matrix, query)
        order = np.argsort(distances, kind="stable")[:k]

        results = [
            Citation(
                chunk_id=compatible[i].id,
                rank=rank,
                content=compatible[i].content,
                score=float(distances[i]),
                page_start=compatible[i].page_start,
                page_end=compatible[i].page_end,
                chunk_index=compatible[i].chunk_index,
                metadata=dict(compatible[i].chunk_metadata or {}),
            )
            for rank, i in enumerate(order, start=1)
        ]
        logger.info(
            f"{__name__}:search - Ranked {len(compatible)} chunks, returning {len(results)} "
            f"for document_id={document_id}"
        )
        return results
