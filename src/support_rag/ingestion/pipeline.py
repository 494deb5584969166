"""Ingestion orchestrator — crawl and/or load, split, and commit chunks.

    sources ──► WebCrawler / load_pdf ──► split_documents ──► VectorStore

Every call mints a fresh UUID per chunk, so ingesting the same source
twice stores its chunks twice; the store only grows.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel

from support_rag.config import settings
from support_rag.exceptions import InvalidInput, NoDocumentsFound
from support_rag.ingestion.chunker import split_documents
from support_rag.ingestion.crawler import WebCrawler
from support_rag.ingestion.loader import load_pdf

if TYPE_CHECKING:
    from langchain_core.documents import Document

    from support_rag.retrieval.base import VectorStoreBase

logger = logging.getLogger(__name__)


class IngestSource(BaseModel):
    """What to ingest: a website to crawl, a PDF on disk, or both."""

    url: str | None = None
    pdf_path: str | None = None


class IngestResult(BaseModel):
    """Counts reported back to the uploader."""

    chunk_count: int
    document_count: int


class IngestionPipeline:
    """Turn an :class:`IngestSource` into stored chunks.

    Parameters
    ----------
    store:
        Destination vector store.
    crawler:
        Website crawler; defaults to a network-backed :class:`WebCrawler`.
    pdf_loader:
        Callable mapping a PDF path to page Documents.
    max_pages:
        Page budget for website crawls. Smaller than the crawler's own
        default so uploads return quickly.
    chunk_size, chunk_overlap:
        Splitter parameters.
    """

    def __init__(
        self,
        store: VectorStoreBase,
        *,
        crawler: WebCrawler | None = None,
        pdf_loader: Callable[[str | Path], list[Document]] = load_pdf,
        max_pages: int = settings.ingest_max_pages,
        chunk_size: int = settings.chunk_size,
        chunk_overlap: int = settings.chunk_overlap,
    ) -> None:
        self._store = store
        self._crawler = crawler or WebCrawler()
        self._pdf_loader = pdf_loader
        self.max_pages = max_pages
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap

    def collect(self, source: IngestSource) -> list[Document]:
        """Return website documents followed by PDF documents."""
        url = source.url.strip() if source.url else ""
        if not url and not source.pdf_path:
            raise InvalidInput("Please provide at least a URL or a PDF file.")

        documents: list[Document] = []
        if url:
            logger.info("Starting to scrape URL: %s", url)
            documents.extend(self._crawler.crawl(url, max_pages=self.max_pages))
        if source.pdf_path:
            logger.info("Loading PDF documents from %s", source.pdf_path)
            documents.extend(self._pdf_loader(source.pdf_path))

        if not documents:
            raise NoDocumentsFound("No documents found from URL or PDF.")
        return documents

    def ingest(self, source: IngestSource) -> IngestResult:
        """Collect, split and store everything *source* points at.

        Raises
        ------
        InvalidInput
            Neither a URL nor a PDF path was given.
        NoDocumentsFound
            The crawl and the PDF together produced nothing.
        PDFLoadError
            The PDF could not be read.
        EmbeddingError
            The store failed to embed the chunks.
        """
        documents = self.collect(source)
        chunks = split_documents(documents, self.chunk_size, self.chunk_overlap)

        ids = [str(uuid.uuid4()) for _ in chunks]
        self._store.add_documents(chunks, ids=ids)

        logger.info("Ingested %d document(s) as %d chunk(s)", len(documents), len(chunks))
        return IngestResult(chunk_count=len(chunks), document_count=len(documents))
