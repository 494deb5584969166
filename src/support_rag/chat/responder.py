"""Answer a user query from retrieved knowledge."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from langchain_core.documents import Document
from pydantic import BaseModel

from support_rag.chat.llm import generate
from support_rag.chat.prompts import build_grounded_prompt
from support_rag.config import settings
from support_rag.exceptions import InvalidInput
from support_rag.retrieval.retriever import AdaptiveRetriever

if TYPE_CHECKING:
    from langchain_core.language_models import BaseChatModel

    from support_rag.retrieval.base import VectorStoreBase
    from support_rag.retrieval.models import MetadataFilter

logger = logging.getLogger(__name__)


class ChatMessage(BaseModel):
    """One prior turn of the conversation."""

    role: str
    content: str


@dataclass
class Answer:
    """Model reply plus what was retrieved to ground it."""

    answer: str
    k: int
    search_mode: str
    documents: list[Document] = field(default_factory=list)


class Responder:
    """Retrieve, build the grounded prompt, and delegate to the chat model.

    Parameters
    ----------
    store:
        Vector store holding the ingested chunks.
    llm:
        Chat model; its reply is returned verbatim.
    assistant_name:
        Name used in the persona preamble.
    """

    def __init__(
        self,
        store: VectorStoreBase,
        llm: BaseChatModel,
        *,
        assistant_name: str = settings.assistant_name,
    ) -> None:
        self._retriever = AdaptiveRetriever(store)
        self._llm = llm
        self.assistant_name = assistant_name

    def answer(
        self,
        query: str,
        history: list[ChatMessage] | None = None,
        *,
        filters: list[MetadataFilter] | None = None,
    ) -> Answer:
        """Answer *query* given the prior *history*.

        Raises
        ------
        InvalidInput
            When *query* is empty.
        RetrievalError, EmbeddingError
            When the vector search fails (after the filter fallback).
        GenerationError
            When the chat model fails.
        """
        query = query.strip() if query else ""
        if not query:
            raise InvalidInput("Invalid query. Please provide a non-empty string.")

        outcome = self._retriever.retrieve(query, filters=filters)
        logger.info(
            "Retrieved %d chunk(s) (k=%d, mode=%s) for query of %d word(s)",
            len(outcome.documents),
            outcome.k,
            outcome.mode,
            len(query.split()),
        )

        prompt = build_grounded_prompt(
            query,
            outcome.documents,
            [msg.model_dump() for msg in history or []],
            assistant_name=self.assistant_name,
        )
        text = generate(self._llm, prompt)
        return Answer(answer=text, k=outcome.k, search_mode=outcome.mode, documents=outcome.documents)
