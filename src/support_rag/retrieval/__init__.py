"""
Retrieval — vector search behind a backend-agnostic interface.

Public surface
--------------
- :class:`AdaptiveRetriever` — query-length-aware search with filter fallback.
- :class:`VectorStoreBase` — abstract backend (subclass for Pinecone, etc.).
- :class:`ChromaVectorStore` — default Chroma backend.
- :class:`MetadataFilter`, :class:`SearchOutcome` — data models.
- :func:`results_for_query` — the query-length tiering rule.
"""

from support_rag.retrieval.base import VectorStoreBase
from support_rag.retrieval.models import MetadataFilter, SearchOutcome
from support_rag.retrieval.retriever import AdaptiveRetriever, results_for_query

__all__ = [
    "AdaptiveRetriever",
    "ChromaVectorStore",
    "MetadataFilter",
    "SearchOutcome",
    "VectorStoreBase",
    "results_for_query",
]


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import ChromaVectorStore to avoid pulling in chromadb at import time."""
    if name == "ChromaVectorStore":
        from support_rag.retrieval.chroma_store import ChromaVectorStore

        return ChromaVectorStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
