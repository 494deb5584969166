"""Embedding model binding."""

from __future__ import annotations

from langchain_huggingface import HuggingFaceEmbeddings

from support_rag.config import settings


def get_embedding_function(model_name: str = settings.embedding_model) -> HuggingFaceEmbeddings:
    """Return the configured sentence-transformer embedding function."""
    return HuggingFaceEmbeddings(model_name=model_name)
