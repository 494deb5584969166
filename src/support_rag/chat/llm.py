"""LLM initialisation — single place to swap providers.

Supports two modes:

1. **OpenAI cloud** (default) — set ``OPENAI_API_KEY``.
2. **OpenAI-compatible server** — set ``LLM_BASE_URL`` to e.g. a local
   vLLM or Ollama endpoint exposing ``/v1/chat/completions``, so
   ``ChatOpenAI`` works unchanged.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from langchain_openai import ChatOpenAI

from support_rag.config import settings
from support_rag.exceptions import GenerationError

if TYPE_CHECKING:
    from langchain_core.language_models import BaseChatModel

logger = logging.getLogger(__name__)


def get_llm(temperature: float = settings.llm_temperature) -> ChatOpenAI:
    """Return the configured chat model.

    When ``settings.llm_base_url`` is set the client is pointed at that
    server instead of the OpenAI cloud API. A dummy API key (``"EMPTY"``)
    is used because self-hosted servers usually skip authentication.
    """
    kwargs: dict = {
        "model": settings.llm_model_name,
        "temperature": temperature,
    }

    if settings.llm_base_url:
        logger.info("Using OpenAI-compatible endpoint: %s", settings.llm_base_url)
        kwargs["base_url"] = settings.llm_base_url
        # LangChain requires a non-empty key.
        kwargs["api_key"] = settings.openai_api_key or "EMPTY"
    else:
        kwargs["api_key"] = settings.openai_api_key

    return ChatOpenAI(**kwargs)


def generate(llm: BaseChatModel, prompt: str) -> str:
    """Send *prompt* to *llm* and return the reply text unchanged.

    Raises
    ------
    GenerationError
        When the model call fails for any reason.
    """
    try:
        response = llm.invoke(prompt)
    except Exception as exc:
        raise GenerationError(f"Language model call failed: {exc}") from exc

    content = getattr(response, "content", response)
    return content if isinstance(content, str) else str(content)
