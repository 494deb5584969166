"""Abstract base class for vector-store backends.

Adding a new backend (Pinecone, Weaviate, Qdrant …) only requires
subclassing :class:`VectorStoreBase` and implementing the abstract
methods. Ingestion and retrieval never talk to a backend directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from langchain_core.documents import Document

    from support_rag.retrieval.models import MetadataFilter


class VectorStoreBase(ABC):
    """Backend-agnostic vector-store interface.

    Parameters
    ----------
    collection_name:
        Logical name of the collection / index / namespace.
    """

    def __init__(self, collection_name: str) -> None:
        self.collection_name = collection_name

    # -- required overrides ---------------------------------------------------

    @abstractmethod
    def add_documents(self, documents: list[Document], ids: list[str]) -> None:
        """Embed and store *documents* in one batch, keyed by *ids*.

        ``len(ids)`` must equal ``len(documents)``. Writing an id that
        already exists overwrites the stored entry.
        """
        ...

    @abstractmethod
    def similarity_search(
        self,
        query: str,
        *,
        k: int = 4,
        filters: list[MetadataFilter] | None = None,
    ) -> list[Document]:
        """Return the *k* chunks nearest to *query*, nearest first.

        Implementations raise :class:`~support_rag.exceptions.RetrievalError`
        when the search fails and must accept ``filters=None``.
        """
        ...

    @abstractmethod
    def health_check(self) -> bool:
        """Return ``True`` when the backend is reachable and ready."""
        ...
