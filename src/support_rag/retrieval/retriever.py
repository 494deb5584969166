"""Adaptive retriever — result count scaled by query length.

Short queries are treated as narrow lookups and get few chunks; long
queries are assumed to need broader context:

=============  =========
words          results
=============  =========
1 – 5          3
6 – 15         5
16 and more    8
=============  =========

Usage::

    from support_rag.retrieval.retriever import AdaptiveRetriever

    retriever = AdaptiveRetriever(store)
    outcome   = retriever.retrieve("What are your opening hours?")
    for doc in outcome.documents:
        print(doc.page_content[:80])
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from support_rag.exceptions import RetrievalError
from support_rag.retrieval.models import SearchOutcome

if TYPE_CHECKING:
    from support_rag.retrieval.base import VectorStoreBase
    from support_rag.retrieval.models import MetadataFilter

logger = logging.getLogger(__name__)

# (max words, results); the first tier whose bound is not exceeded wins.
RESULT_TIERS: tuple[tuple[int, int], ...] = ((5, 3), (15, 5))
MAX_RESULTS = 8


def results_for_query(query: str) -> int:
    """Return how many chunks to retrieve for *query*, based on its word count."""
    word_count = len(query.split())
    for max_words, k in RESULT_TIERS:
        if word_count <= max_words:
            return k
    return MAX_RESULTS


class AdaptiveRetriever:
    """Retriever that wraps any :class:`VectorStoreBase`.

    Parameters
    ----------
    store:
        A concrete vector-store backend.
    """

    def __init__(self, store: VectorStoreBase) -> None:
        self._store = store

    @property
    def store(self) -> VectorStoreBase:
        return self._store

    def retrieve(
        self,
        query: str,
        *,
        filters: list[MetadataFilter] | None = None,
    ) -> SearchOutcome:
        """Fetch the nearest chunks for *query*.

        With *filters*, the filtered search runs first; if it fails the
        unfiltered search runs instead and the outcome is tagged
        ``"fallback"``. Without filters a single unfiltered search runs.
        Filters only ever come from the caller; none are applied by default.

        Raises
        ------
        RetrievalError
            When the last search attempted fails.
        """
        k = results_for_query(query)

        if filters:
            try:
                docs = self._store.similarity_search(query, k=k, filters=filters)
                return SearchOutcome(documents=docs, k=k, mode="filtered")
            except RetrievalError as exc:
                logger.warning("Filtered search failed, falling back to unfiltered search: %s", exc)
            docs = self._store.similarity_search(query, k=k)
            return SearchOutcome(documents=docs, k=k, mode="fallback")

        docs = self._store.similarity_search(query, k=k)
        return SearchOutcome(documents=docs, k=k, mode="unfiltered")
