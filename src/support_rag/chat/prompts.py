"""Prompt templates for the support chat.

The grounding prompt is a single text block: persona and rules first,
then the conversation context (question, retrieved knowledge, history).
Keeping it in one place makes it easy to audit and version.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from langchain_core.documents import Document

PERSONA_PREAMBLE = """\
You are a friendly, professional AI assistant named {assistant_name}, designed for seamless user interaction. Your primary function is to provide accurate and relevant information using ONLY the knowledge provided below.

Core Instructions:
- You are an AI-powered chatbot that engages customers and visitors, answering questions about our products and services with personalized, agent-level support.
- Persona: Maintain a professional and helpful tone. You may be creative, but keep your response simple.
- Knowledge: Your answers must be based strictly on the provided knowledge. Do NOT use any external information, personal opinions, or speculation.
- "I Don't Know" Policy: If the provided knowledge does not contain the answer, politely state that you cannot find the information. Then do your best to suggest related topics or anything from the knowledge the user might find useful for their query, but never make up an answer or go out of context.
- Formatting: Use markdown formatting like bold text, bullet points, or numbered lists to improve clarity when appropriate.
- Length: Keep your response precise and relevant, not lengthy.

Specific User Scenarios:
- Greeting: If the user's query is a simple greeting (e.g., "hello", "hi"), respond with a warm and inviting welcome, such as "Hello! How can I assist you today?". Do not greet in every response.
- Contact Details: When providing contact information or website links, ensure the links are clickable and properly formatted.
- Further Assistance: Always end your response by politely offering further assistance, for example, "Is there anything else I can help you with?"
"""


def format_knowledge(documents: Iterable[Document]) -> str:
    """Join chunk texts with blank lines, in retrieval order."""
    return "\n\n".join(doc.page_content for doc in documents)


def format_history(history: Iterable[Mapping[str, Any]]) -> str:
    """Render history as one ``role: content`` line per message."""
    return "\n".join(f"{msg['role']}: {msg['content']}" for msg in history)


def build_grounded_prompt(
    query: str,
    documents: list[Document],
    history: Iterable[Mapping[str, Any]] = (),
    *,
    assistant_name: str = "aBitBot",
) -> str:
    """Assemble the retrieval-grounded prompt sent to the chat model.

    Parameters
    ----------
    query:
        The user's question, inserted verbatim.
    documents:
        Retrieved chunks; only their text is used.
    history:
        Prior turns as ``{"role": ..., "content": ...}`` mappings.
    assistant_name:
        Name the assistant introduces itself with.
    """
    preamble = PERSONA_PREAMBLE.format(assistant_name=assistant_name)
    return (
        f"{preamble}\n"
        "Conversation Context:\n"
        f"Knowledge:\n{format_knowledge(documents)}\n\n"
        f"Conversation history:\n{format_history(history)}\n\n"
        f"Question: {query}\n"
    )
