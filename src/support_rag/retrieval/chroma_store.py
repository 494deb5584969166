"""Chroma implementation of the vector-store abstraction."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import chromadb
from langchain_core.documents import Document

from support_rag.config import settings
from support_rag.exceptions import EmbeddingError, RetrievalError
from support_rag.retrieval.base import VectorStoreBase

if TYPE_CHECKING:
    from langchain_core.embeddings import Embeddings

    from support_rag.retrieval.models import MetadataFilter

logger = logging.getLogger(__name__)

_OP_MAP = {
    "eq": "$eq",
    "ne": "$ne",
    "gt": "$gt",
    "gte": "$gte",
    "lt": "$lt",
    "lte": "$lte",
    "in": "$in",
    "nin": "$nin",
}


def _build_chroma_where(filters: list[MetadataFilter]) -> dict[str, Any] | None:
    """Convert a list of :class:`MetadataFilter` to Chroma ``where`` syntax."""
    if not filters:
        return None

    clauses: list[dict[str, Any]] = []
    for f in filters:
        chroma_op = _OP_MAP.get(f.operator)
        if chroma_op is None:
            raise ValueError(f"Unsupported filter operator: {f.operator!r}")
        clauses.append({f.field: {chroma_op: f.value}})

    if len(clauses) == 1:
        return clauses[0]
    return {"$and": clauses}


def _clean_metadata(metadata: dict[str, Any]) -> dict[str, Any]:
    """Chroma only stores scalar metadata; drop ``None`` and stringify the rest."""
    cleaned: dict[str, Any] = {}
    for key, value in metadata.items():
        if value is None:
            continue
        if isinstance(value, (str, int, float, bool)):
            cleaned[key] = value
        else:
            cleaned[key] = str(value)
    return cleaned


class ChromaVectorStore(VectorStoreBase):
    """Chroma-backed vector store.

    Parameters
    ----------
    embeddings:
        LangChain embedding model used for both chunks and queries.
    collection_name:
        Name of the Chroma collection.
    host:
        Chroma server hostname.
    port:
        Chroma server port.
    """

    def __init__(
        self,
        embeddings: Embeddings,
        collection_name: str = settings.chroma_collection,
        *,
        host: str = settings.chroma_host,
        port: int = settings.chroma_port,
    ) -> None:
        super().__init__(collection_name)
        self._client = chromadb.HttpClient(host=host, port=port)
        self._collection = self._client.get_or_create_collection(collection_name)
        self._embeddings = embeddings
        logger.info("Connected to Chroma collection %r at %s:%s", collection_name, host, port)

    # -- VectorStoreBase overrides --------------------------------------------

    def add_documents(self, documents: list[Document], ids: list[str]) -> None:
        if len(ids) != len(documents):
            raise ValueError(f"Got {len(ids)} ids for {len(documents)} documents")
        if not documents:
            return

        texts = [doc.page_content for doc in documents]
        try:
            vectors = self._embeddings.embed_documents(texts)
        except Exception as exc:
            raise EmbeddingError(f"Embedding {len(texts)} chunk(s) failed: {exc}") from exc

        self._collection.upsert(
            ids=ids,
            documents=texts,
            metadatas=[_clean_metadata(doc.metadata) for doc in documents],
            embeddings=vectors,
        )
        logger.info("Stored %d chunk(s) in %r", len(ids), self.collection_name)

    def similarity_search(
        self,
        query: str,
        *,
        k: int = 4,
        filters: list[MetadataFilter] | None = None,
    ) -> list[Document]:
        try:
            embedding = self._embeddings.embed_query(query)
        except Exception as exc:
            raise EmbeddingError(f"Embedding query failed: {exc}") from exc

        try:
            results = self._collection.query(
                query_embeddings=[embedding],
                n_results=k,
                where=_build_chroma_where(filters) if filters else None,
                include=["documents", "metadatas", "distances"],
            )
        except Exception as exc:
            raise RetrievalError(f"Chroma query failed: {exc}") from exc

        hits: list[Document] = []
        ids = results.get("ids", [[]])[0]
        docs = results.get("documents", [[]])[0]
        metas = results.get("metadatas", [[]])[0]
        distances = results.get("distances", [[]])[0]

        for doc_id, content, meta, dist in zip(ids, docs, metas, distances):
            metadata = dict(meta or {})
            metadata["id"] = doc_id
            # Chroma returns L2 distances; convert to a 0-1 similarity score.
            metadata["score"] = 1.0 / (1.0 + dist)
            hits.append(Document(page_content=content or "", metadata=metadata))
        return hits

    def health_check(self) -> bool:
        try:
            self._client.heartbeat()
            return True
        except Exception:
            logger.warning("Chroma health-check failed", exc_info=True)
            return False
