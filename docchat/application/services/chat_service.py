"""
Chat service for grounded Q&A over the session's active document.

Runs every check that can fail before the stream opens (session, active
document, readiness, retrieval, model availability) and returns an
AnswerStream that generates, cites and persists the answer.

Dependencies: docchat.core.retriever, docchat.core.embedding_gateway, docchat.core.answer_stream
System role: Chat service orchestration layer
"""

import logging
from uuid import UUID

from langchain_core.language_models import BaseChatModel
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from docchat.boundary.db.CRUD.document_crud import document_crud
from docchat.boundary.db.CRUD.message_crud import message_crud
from docchat.boundary.db.CRUD.session_crud import session_crud
from docchat.boundary.db.models.document_model import DocumentStatus
from docchat.core.answer_stream import AnswerStream
from docchat.core.embedding_gateway import EmbeddingGateway
from docchat.core.exceptions import (
    DocumentNotIndexedError,
    DocumentNotReadyError,
    ModelUnavailableError,
    NoActiveDocumentError,
    SessionNotFoundError,
    ValidationError,
)
from docchat.core.rag_prompt import build_messages
from docchat.core.retriever import Retriever
from docchat.models.citation import Citation

logger = logging.getLogger(__name__)


class ChatService:
    """
    Chat service for streamed, cited answers.

    The request-scoped db session is used for the pre-stream checks only;
    the exchange is persisted through a fresh session from session_factory
    because the stream outlives the request handler.
    """

    def __init__(
        self,
        db: AsyncSession,
        session_factory: async_sessionmaker[AsyncSession],
        embedding_gateway: EmbeddingGateway,
        retriever: Retriever,
        chat_model: BaseChatModel | None,
    ) -> None:
        """
        Initialize chat service.

        Args:
            db: AsyncSession for pre-stream reads
            session_factory: Factory for the persistence session
            embedding_gateway: Embeds the question
            retriever: Ranks the active document's chunks
            chat_model: Model for generation, None when not configured
        """
        self.db = db
        self.session_factory = session_factory
        self.embedding_gateway = embedding_gateway
        self.retriever = retriever
        self.chat_model = chat_model

    async def prepare_answer(
        self,
        session_id: UUID,
        question: str,
        top_k: int | None = None,
    ) -> AnswerStream:
        """
        Validate, retrieve and build the prompt for one question.

        Flow:
        1. Resolve the session and its active document
        2. Require the document to be ready
        3. Embed the question and retrieve top-k chunks
        4. Build the prompt from exactly those chunks

        Args:
            session_id: Session UUID
            question: User question
            top_k: Chunks to retrieve (default 5, max 10)

        Returns:
            AnswerStream: Ready to iterate

        Raises:
            ValidationError: Blank question
            SessionNotFoundError: Session does not exist
            NoActiveDocumentError: Session has no active document
            DocumentNotReadyError: Active document is not ready
            DocumentNotIndexedError: Retrieval found no chunks
            ModelUnavailableError: No chat model configured
        """
        question = (question or "").strip()
        if not question:
            raise ValidationError("question must not be empty", field="question")

        logger.info(f"{__name__}:prepare_answer - START session_id={session_id}")

        # Step 1: Resolve session and active document
        session = await session_crud.get_by_id(self.db, session_id)
        if session is None:
            raise SessionNotFoundError(str(session_id))
        if session.active_document_id is None:
            raise NoActiveDocumentError(str(session_id))

        document = await document_crud.get_in_session(
            self.db, session.active_document_id, session_id
        )
        if document is None:
            raise NoActiveDocumentError(str(session_id))

        # Step 2: Require ready
        if document.status != DocumentStatus.READY:
            raise DocumentNotReadyError(str(document.id), document.status.value)

        # Step 3: Embed and retrieve
        query_vector = await self.embedding_gateway.embed_query(question)
        citations = await self.retriever.search(
            self.db, document.id, session_id, query_vector, top_k
        )
        if not citations:
            raise DocumentNotIndexedError(str(document.id))

        if self.chat_model is None:
            raise ModelUnavailableError()

        # Step 4: Prompt
        messages = build_messages(question, citations)
        logger.info(
            f"{__name__}:prepare_answer - Ready document_id={document.id} "
            f"citations={len(citations)}"
        )

        document_id = document.id

        async def persist(answer: str, used: list[Citation]) -> None:
            await self._persist_exchange(session_id, document_id, question, answer, used)

        return AnswerStream(self.chat_model, messages, citations, persist)

    async def _persist_exchange(
        self,
        session_id: UUID,
        document_id: UUID,
        question: str,
        answer: str,
        citations: list[Citation],
    ) -> None:
        async with self.session_factory() as db:
            await message_crud.add_exchange(
                db,
                session_id=session_id,
                document_id=document_id,
                question=question,
                answer=answer,
                citations=[citation.model_dump(mode="json") for citation in citations],
            )
            await db.commit()
        logger.info(f"{__name__}:_persist_exchange - Stored exchange for session_id={session_id}")
