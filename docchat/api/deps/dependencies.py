"""
Dependency injection container.

Factory functions for FastAPI dependencies. Long-lived collaborators
(ticket signer, storage, provider clients, processing queue) are built
lazily once per process in ServiceCache; services are built per request
around the request's database session.

Dependencies: docchat.configs, docchat.application, docchat.boundary, docchat.core
System role: DI container for service injection
"""

from fastapi import Depends
from langchain_core.language_models import BaseChatModel
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from docchat.application.processing_queue import ProcessingQueue
from docchat.application.services import (
    ChatService,
    DocumentProcessor,
    SessionService,
    UploadService,
)
from docchat.boundary.db import get_async_db, get_async_session_factory
from docchat.boundary.llm import build_chat_model, build_embeddings
from docchat.boundary.storage import UploadStorage
from docchat.configs import Settings, get_settings
from docchat.core.document_processing import DocumentPipeline
from docchat.core.embedding_gateway import EmbeddingGateway
from docchat.core.retriever import Retriever
from docchat.core.upload_tokens import UploadTokenSigner

_UNSET = object()


class ServiceCache:
    """Container for cached service collaborators."""

    def __init__(
        self,
        settings: Settings | None = None,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
        chat_model: BaseChatModel | None | object = _UNSET,
        embedding_gateway: EmbeddingGateway | None = None,
    ) -> None:
        """
        Args:
            settings: Settings to build from (defaults to get_settings())
            session_factory: Session factory for background work (defaults to the app factory)
            chat_model: Pre-built chat model; omitted means build from settings
            embedding_gateway: Pre-built gateway; omitted means build from settings
        """
        self._settings = settings
        self._session_factory = session_factory
        self._chat_model = chat_model
        self._embedding_gateway = embedding_gateway
        self._signer: UploadTokenSigner | None = None
        self._storage: UploadStorage | None = None
        self._retriever: Retriever | None = None
        self._pipeline: DocumentPipeline | None = None
        self._queue: ProcessingQueue | None = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            self._session_factory = get_async_session_factory()
        return self._session_factory

    @property
    def signer(self) -> UploadTokenSigner:
        """Get cached upload ticket signer."""
        if self._signer is None:
            upload = self.settings.upload
            self._signer = UploadTokenSigner(upload.secret, upload.token_ttl_seconds)
        return self._signer

    @property
    def storage(self) -> UploadStorage:
        """Get cached upload storage."""
        if self._storage is None:
            upload = self.settings.upload
            self._storage = UploadStorage(upload.temp_dir, upload.files_dir)
        return self._storage

    @property
    def embedding_gateway(self) -> EmbeddingGateway:
        """Get cached embedding gateway (hash fallback when no provider is configured)."""
        if self._embedding_gateway is None:
            llm = self.settings.llm
            self._embedding_gateway = EmbeddingGateway(
                build_embeddings(llm),
                dim=llm.embedding_dim,
                attempts=llm.provider_attempts,
            )
        return self._embedding_gateway

    @property
    def chat_model(self) -> BaseChatModel | None:
        """Get cached chat model, None when not configured."""
        if self._chat_model is _UNSET:
            self._chat_model = build_chat_model(self.settings.llm)
        return self._chat_model

    @property
    def retriever(self) -> Retriever:
        if self._retriever is None:
            llm = self.settings.llm
            self._retriever = Retriever(llm.default_top_k, llm.max_top_k)
        return self._retriever

    @property
    def pipeline(self) -> DocumentPipeline:
        """Get cached document pipeline."""
        if self._pipeline is None:
            self._pipeline = DocumentPipeline(self.embedding_gateway, self.settings.ingestion)
        return self._pipeline

    @property
    def processor(self) -> DocumentProcessor:
        return DocumentProcessor(self.session_factory, self.pipeline, self.storage)

    @property
    def queue(self) -> ProcessingQueue:
        """Get the process-wide processing queue."""
        if self._queue is None:
            self._queue = ProcessingQueue(self.processor)
        return self._queue

    def clear(self) -> None:
        """Drop every cached instance built from settings."""
        self._signer = None
        self._storage = None
        self._retriever = None
        self._pipeline = None
        self._queue = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


def get_session_service(db: AsyncSession = Depends(get_async_db)) -> SessionService:
    """
    Get session service instance.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        SessionService: Session service instance
    """
    return SessionService(db=db)


def get_upload_service(
    db: AsyncSession = Depends(get_async_db),
    cache: ServiceCache = Depends(get_service_cache),
) -> UploadService:
    """
    Get upload service instance.

    Args:
        db: Async database session (injected via Depends)
        cache: Service cache (injected via Depends)

    Returns:
        UploadService: Upload service wired to the processing queue
    """
    return UploadService(
        db=db,
        signer=cache.signer,
        storage=cache.storage,
        settings=cache.settings.upload,
        queue=cache.queue,
    )


def get_chat_service(
    db: AsyncSession = Depends(get_async_db),
    cache: ServiceCache = Depends(get_service_cache),
) -> ChatService:
    """Get chat service instance."""
    return ChatService(
        db=db,
        session_factory=cache.session_factory,
        embedding_gateway=cache.embedding_gateway,
        retriever=cache.retriever,
        chat_model=cache.chat_model,
    )
