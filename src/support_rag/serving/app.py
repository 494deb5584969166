"""FastAPI application exposing ingestion and chat as a REST API."""

from __future__ import annotations

import logging
import shutil
import tempfile
from functools import lru_cache
from pathlib import Path

from fastapi import Depends, FastAPI, File, Form, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from support_rag.chat.responder import ChatMessage
from support_rag.config import settings
from support_rag.context import RAGContext
from support_rag.exceptions import InvalidInput, NotReady
from support_rag.ingestion.pipeline import IngestSource
from support_rag.retrieval.models import MetadataFilter

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

NOT_READY_MESSAGE = "RAG system is not yet initialized. Please upload data first."

app = FastAPI(
    title="Support RAG API",
    version="0.1.0",
    description="Upload websites or PDFs, then chat with an assistant grounded in them.",
)
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])


@lru_cache(maxsize=1)
def get_context() -> RAGContext:
    """Build the process-wide context on first use."""
    logger.info("Initializing RAG system...")
    return RAGContext.from_settings()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


# ── Request / Response schemas ────────────────────────────────────────
class ChatRequest(BaseModel):
    """Incoming question plus the conversation so far."""

    query: str = ""
    history: list[ChatMessage] = Field(default_factory=list)
    filters: list[MetadataFilter] = Field(default_factory=list)


class ChatResponse(BaseModel):
    """Model reply, unmodified."""

    response: str


class UploadResponse(BaseModel):
    message: str
    details: str


# ── Routes ────────────────────────────────────────────────────────────
@app.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe."""
    return {"status": "ok"}


@app.get("/status")
def status(context: RAGContext = Depends(get_context)):
    """Readiness probe: ready once data has been ingested."""
    if not context.ready:
        return JSONResponse(status_code=503, content={"message": "RAG system is not yet initialized."})
    return {"message": "Backend is running and RAG system ready."}


@app.post("/upload", response_model=UploadResponse)
def upload(
    url: str | None = Form(default=None),
    pdf: UploadFile | None = File(default=None),
    context: RAGContext = Depends(get_context),
):
    """Ingest a website, a PDF, or both."""
    url = url.strip() if url else None
    # Browsers send an empty file part when nothing was picked.
    if pdf is not None and not pdf.filename:
        pdf = None
    if not url and pdf is None:
        return _error(400, "Please provide at least a URL or a PDF file.")

    pdf_path: Path | None = None
    try:
        if pdf is not None:
            with tempfile.NamedTemporaryFile(delete=False, suffix=".pdf") as fh:
                shutil.copyfileobj(pdf.file, fh)
                pdf_path = Path(fh.name)

        result = context.ingest(IngestSource(url=url, pdf_path=str(pdf_path) if pdf_path else None))
    except InvalidInput as exc:
        return _error(400, str(exc))
    except Exception:
        logger.exception("Error processing upload")
        return _error(500, "Internal server error.")
    finally:
        if pdf_path is not None:
            pdf_path.unlink(missing_ok=True)

    return UploadResponse(
        message="Data uploaded and processed successfully.",
        details=f"Chunks processed: {result.chunk_count}, documents ingested: {result.document_count}",
    )


@app.post("/chat", response_model=ChatResponse)
def chat(request: ChatRequest, context: RAGContext = Depends(get_context)):
    """Answer a question from the ingested knowledge."""
    try:
        result = context.answer(request.query, request.history, filters=request.filters or None)
    except NotReady:
        return _error(503, NOT_READY_MESSAGE)
    except InvalidInput as exc:
        return _error(400, str(exc))
    except Exception:
        logger.exception("Error processing chat request")
        return _error(500, "An internal server error occurred.")

    return ChatResponse(response=result.answer)


def main() -> None:
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run("support_rag.serving.app:app", host="0.0.0.0", port=5000)


if __name__ == "__main__":
    main()
