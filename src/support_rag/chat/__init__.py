"""
Chat — grounded answers from retrieved knowledge.

Public API
----------
- :class:`Responder` — retrieve, build the grounded prompt, call the model.
- :class:`ChatMessage` — one prior conversation turn.
- :class:`Answer` — the model reply plus retrieval details.
"""

from support_rag.chat.responder import Answer, ChatMessage, Responder

__all__ = [
    "Answer",
    "ChatMessage",
    "Responder",
]
