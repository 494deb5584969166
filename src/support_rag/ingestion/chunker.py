"""Text chunking strategies."""

from __future__ import annotations

from typing import TYPE_CHECKING

from langchain_text_splitters import RecursiveCharacterTextSplitter

from support_rag.config import settings

if TYPE_CHECKING:
    from langchain_core.documents import Document

# Paragraph, line, sentence, word, then raw characters.
SEPARATORS = ["\n\n", "\n", ". ", " ", ""]


def split_documents(
    documents: list[Document],
    chunk_size: int = settings.chunk_size,
    chunk_overlap: int = settings.chunk_overlap,
) -> list[Document]:
    """Split *documents* into overlapping chunks for embedding.

    The splitter only falls through to a coarser separator when the finer
    one cannot keep a window within *chunk_size*, so paragraph breaks win
    over sentence breaks, and so on.

    Parameters
    ----------
    documents:
        Source documents produced by the crawler or the PDF loader.
    chunk_size:
        Maximum number of characters per chunk.
    chunk_overlap:
        Number of overlapping characters between consecutive chunks.
        Must be smaller than *chunk_size*.

    Returns
    -------
    list[Document]
        Chunks carrying the parent metadata plus ``start_index``, the
        character offset of the chunk inside its parent.
    """
    if chunk_overlap >= chunk_size:
        raise ValueError(
            f"chunk_overlap ({chunk_overlap}) must be < chunk_size ({chunk_size})"
        )

    splitter = RecursiveCharacterTextSplitter(
        chunk_size=chunk_size,
        chunk_overlap=chunk_overlap,
        length_function=len,
        separators=SEPARATORS,
        add_start_index=True,
    )
    return splitter.split_documents(documents)
