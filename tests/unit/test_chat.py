"""Unit tests for prompt construction, the LLM wrapper, and the responder.

No real model is called: replies come from LangChain's fake chat model
or from a ``MagicMock`` when the exact prompt needs inspecting.
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from langchain_core.documents import Document
from langchain_core.language_models.fake_chat_models import FakeListChatModel
from langchain_core.messages import AIMessage

from support_rag.chat.llm import generate, get_llm
from support_rag.chat.prompts import (
    PERSONA_PREAMBLE,
    build_grounded_prompt,
    format_history,
    format_knowledge,
)
from support_rag.chat.responder import ChatMessage, Responder
from support_rag.exceptions import GenerationError, InvalidInput, RetrievalError

# ── Prompts ─────────────────────────────────────────────────────────────


class TestPrompts:
    def test_knowledge_joined_by_blank_lines(self) -> None:
        docs = [Document(page_content="alpha"), Document(page_content="beta")]
        assert format_knowledge(docs) == "alpha\n\nbeta"

    def test_history_rendered_one_line_per_message(self) -> None:
        history = [{"role": "user", "content": "hi"}, {"role": "assistant", "content": "Hello!"}]
        assert format_history(history) == "user: hi\nassistant: Hello!"

    def test_grounded_prompt_contains_every_part(self, sample_chunks) -> None:
        prompt = build_grounded_prompt(
            "Can I return shoes?",
            sample_chunks[:2],
            [{"role": "user", "content": "hello"}],
            assistant_name="HelpBot",
        )

        assert prompt.startswith(PERSONA_PREAMBLE.format(assistant_name="HelpBot"))
        assert "Our support desk is open 9am to 5pm.\n\nReturns are accepted within 30 days." in prompt
        assert "Conversation history:\nuser: hello" in prompt
        assert prompt.rstrip().endswith("Question: Can I return shoes?")

    def test_preamble_rules(self) -> None:
        preamble = PERSONA_PREAMBLE.format(assistant_name="HelpBot")
        assert "named HelpBot" in preamble
        assert "ONLY the knowledge provided" in preamble
        assert "markdown" in preamble
        assert "Is there anything else I can help you with?" in preamble


# ── LLM wrapper ─────────────────────────────────────────────────────────


class TestGenerate:
    def test_returns_reply_verbatim(self) -> None:
        llm = FakeListChatModel(responses=["**Sure!** Returns take 30 days."])
        assert generate(llm, "prompt") == "**Sure!** Returns take 30 days."

    def test_failure_becomes_generation_error(self) -> None:
        llm = MagicMock()
        llm.invoke.side_effect = RuntimeError("rate limited")
        with pytest.raises(GenerationError, match="rate limited"):
            generate(llm, "prompt")


class TestGetLlm:
    def test_openai_cloud_by_default(self) -> None:
        with patch("support_rag.chat.llm.ChatOpenAI") as chat_cls, patch(
            "support_rag.chat.llm.settings"
        ) as fake_settings:
            fake_settings.llm_model_name = "gpt-4o-mini"
            fake_settings.llm_base_url = ""
            fake_settings.openai_api_key = "sk-test"
            get_llm(temperature=0.4)

        chat_cls.assert_called_once_with(model="gpt-4o-mini", temperature=0.4, api_key="sk-test")

    def test_base_url_uses_dummy_key(self) -> None:
        with patch("support_rag.chat.llm.ChatOpenAI") as chat_cls, patch(
            "support_rag.chat.llm.settings"
        ) as fake_settings:
            fake_settings.llm_model_name = "local-model"
            fake_settings.llm_base_url = "http://localhost:8001/v1"
            fake_settings.openai_api_key = ""
            get_llm(temperature=0.0)

        chat_cls.assert_called_once_with(
            model="local-model",
            temperature=0.0,
            base_url="http://localhost:8001/v1",
            api_key="EMPTY",
        )


# ── Responder ───────────────────────────────────────────────────────────


class TestResponder:
    def test_answer_is_model_text_verbatim(self, fake_store, sample_chunks) -> None:
        fake_store.add_documents(sample_chunks, ids=["a", "b", "c"])
        responder = Responder(fake_store, FakeListChatModel(responses=["We open at 9am."]))

        result = responder.answer("When do you open?")

        assert result.answer == "We open at 9am."
        assert result.k == 3
        assert result.search_mode == "unfiltered"
        assert len(result.documents) == 3

    def test_prompt_carries_knowledge_history_and_query(self, fake_store, sample_chunks) -> None:
        fake_store.add_documents(sample_chunks, ids=["a", "b", "c"])
        llm = MagicMock()
        llm.invoke.return_value = AIMessage(content="ok")
        history = [ChatMessage(role="user", content="hi"), ChatMessage(role="assistant", content="Hello!")]

        Responder(fake_store, llm, assistant_name="HelpBot").answer("Is shipping free?", history)

        prompt = llm.invoke.call_args.args[0]
        assert "named HelpBot" in prompt
        assert "Shipping is free above 50 EUR." in prompt
        assert "user: hi\nassistant: Hello!" in prompt
        assert "Question: Is shipping free?" in prompt

    def test_long_query_retrieves_more(self, fake_store) -> None:
        responder = Responder(fake_store, FakeListChatModel(responses=["ok"]))
        responder.answer(" ".join(["word"] * 16))
        assert fake_store.searches[-1]["k"] == 8

    @pytest.mark.parametrize("query", ["", "   "])
    def test_empty_query_rejected(self, fake_store, query: str) -> None:
        responder = Responder(fake_store, FakeListChatModel(responses=["ok"]))
        with pytest.raises(InvalidInput):
            responder.answer(query)
        assert fake_store.searches == []

    def test_generation_failure_surfaces(self, fake_store) -> None:
        llm = MagicMock()
        llm.invoke.side_effect = TimeoutError("model timed out")
        with pytest.raises(GenerationError):
            Responder(fake_store, llm).answer("hello")

    def test_retrieval_failure_surfaces(self, make_store) -> None:
        responder = Responder(make_store(fail_all=True), FakeListChatModel(responses=["ok"]))
        with pytest.raises(RetrievalError):
            responder.answer("hello")
