"""Document loaders — thin wrappers around LangChain document loaders."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from langchain_community.document_loaders import PyPDFLoader
from pypdf.errors import PyPdfError

from support_rag.exceptions import PDFLoadError

if TYPE_CHECKING:
    from langchain_core.documents import Document

logger = logging.getLogger(__name__)


def load_pdf(path: str | Path) -> list[Document]:
    """Load a single PDF file, one Document per page.

    Raises
    ------
    PDFLoadError
        When *path* does not point to a readable, valid PDF.
    """
    path = Path(path)
    if not path.is_file():
        raise PDFLoadError(f"PDF not found: {path}")

    try:
        docs = PyPDFLoader(str(path)).load()
    except (OSError, ValueError, PyPdfError) as exc:
        raise PDFLoadError(f"Could not read PDF {path}: {exc}") from exc

    logger.info("Loaded %d page(s) from %s", len(docs), path)
    return docs
