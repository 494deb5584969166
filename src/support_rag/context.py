"""Explicit runtime context shared by ingestion and chat requests.

The context owns the vector store and chat model references. The store
is created lazily on first ingestion and becomes *visible* to queries
only after that ingestion succeeds; until then :meth:`RAGContext.answer`
raises :class:`~support_rag.exceptions.NotReady`.

References are swapped under a lock. Two concurrent ingestions may both
write to the same store; their chunks never collide because every chunk
gets its own id.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from openai import OpenAIError

from support_rag.chat.responder import Answer, ChatMessage, Responder
from support_rag.config import settings
from support_rag.exceptions import NotReady
from support_rag.ingestion.loader import load_pdf
from support_rag.ingestion.pipeline import IngestionPipeline, IngestResult, IngestSource

if TYPE_CHECKING:
    from langchain_core.documents import Document
    from langchain_core.language_models import BaseChatModel

    from support_rag.ingestion.crawler import WebCrawler
    from support_rag.retrieval.base import VectorStoreBase
    from support_rag.retrieval.models import MetadataFilter

logger = logging.getLogger(__name__)


class RAGContext:
    """Holds the store and model bindings for one running service.

    Parameters
    ----------
    store_factory:
        Builds the vector store the first time ingestion needs it.
    llm:
        Chat model used to answer queries.
    crawler:
        Optional crawler override passed to every ingestion.
    pdf_loader:
        Optional PDF loader override passed to every ingestion.
    """

    def __init__(
        self,
        store_factory: Callable[[], VectorStoreBase],
        llm: BaseChatModel | None = None,
        *,
        crawler: WebCrawler | None = None,
        pdf_loader: Callable[[str | Path], list[Document]] = load_pdf,
    ) -> None:
        self._store_factory = store_factory
        self._crawler = crawler
        self._pdf_loader = pdf_loader
        self._lock = threading.Lock()
        self._store: VectorStoreBase | None = None
        self._llm = llm

    @classmethod
    def from_settings(cls) -> RAGContext:
        """Build a context wired to Chroma, HuggingFace embeddings and ChatOpenAI."""
        from support_rag.chat.llm import get_llm
        from support_rag.ingestion.embedder import get_embedding_function
        from support_rag.retrieval.chroma_store import ChromaVectorStore

        def _store() -> VectorStoreBase:
            logger.info("Creating vector store collection %r", settings.chroma_collection)
            return ChromaVectorStore(get_embedding_function())

        try:
            llm = get_llm()
        except (OpenAIError, ValueError) as exc:
            # Queries answer NotReady until a model is bound with set_llm.
            logger.warning("Chat model unavailable: %s", exc)
            llm = None

        return cls(_store, llm)

    # -- bindings -------------------------------------------------------------

    @property
    def store(self) -> VectorStoreBase | None:
        return self._store

    @property
    def llm(self) -> BaseChatModel | None:
        return self._llm

    @property
    def ready(self) -> bool:
        with self._lock:
            return self._store is not None and self._llm is not None

    def set_store(self, store: VectorStoreBase) -> None:
        with self._lock:
            self._store = store

    def set_llm(self, llm: BaseChatModel) -> None:
        with self._lock:
            self._llm = llm

    def _store_for_ingestion(self) -> VectorStoreBase:
        with self._lock:
            if self._store is not None:
                return self._store
        return self._store_factory()

    # -- operations -----------------------------------------------------------

    def ingest(self, source: IngestSource) -> IngestResult:
        """Ingest *source* and publish the store for queries once it succeeds."""
        store = self._store_for_ingestion()
        result = IngestionPipeline(store, crawler=self._crawler, pdf_loader=self._pdf_loader).ingest(source)
        self.set_store(store)
        return result

    def answer(
        self,
        query: str,
        history: list[ChatMessage] | None = None,
        *,
        filters: list[MetadataFilter] | None = None,
    ) -> Answer:
        """Answer *query*; raises :class:`NotReady` before the first ingestion."""
        with self._lock:
            store, llm = self._store, self._llm
        if store is None or llm is None:
            raise NotReady("RAG system is not yet initialized. Please upload data first.")
        return Responder(store, llm).answer(query, history, filters=filters)
