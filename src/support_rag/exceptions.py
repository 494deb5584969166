"""Error taxonomy shared by ingestion, retrieval and serving.

Only :class:`FetchFailure` is absorbed inside the core (by the crawler,
per page). Every other error propagates to the caller; the HTTP layer
decides how much of it the client gets to see.
"""

from __future__ import annotations


class RAGError(Exception):
    """Base class for every error raised by ``support_rag``."""


class InvalidInput(RAGError):
    """The request is missing required fields or is malformed."""


class NotReady(RAGError):
    """The vector store or language model has not been initialised yet."""


class NoDocumentsFound(RAGError):
    """Ingestion produced no documents from any of the given sources."""


class FetchFailure(RAGError):
    """A single page could not be fetched or parsed."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class EmbeddingError(RAGError):
    """The embedding model failed (quota, network, invalid input)."""


class GenerationError(RAGError):
    """The language model call failed."""


class RetrievalError(RAGError):
    """Vector search failed."""


class PDFLoadError(RAGError, IOError):
    """The PDF path is unreadable or the file is not a valid PDF."""
