"""Shared configuration loaded from environment / .env file."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application-wide settings, populated from env vars or .env file."""

    # LLM
    openai_api_key: str = Field(default="", description="OpenAI API key (or dummy value for a local server)")
    llm_model_name: str = Field(default="gpt-4o-mini", description="Chat model identifier")
    llm_base_url: str = Field(
        default="",
        description=(
            "Base URL for an OpenAI-compatible chat API. Leave empty to use "
            "OpenAI cloud, e.g. 'http://localhost:8001/v1' for a local vLLM server."
        ),
    )
    llm_temperature: float = 0.4
    assistant_name: str = "aBitBot"

    # Vector store
    chroma_host: str = "localhost"
    chroma_port: int = 8000
    chroma_collection: str = "data_collection"

    # Embedding
    embedding_model: str = "sentence-transformers/all-MiniLM-L6-v2"

    # Chunking
    chunk_size: int = Field(default=300, gt=0, description="Maximum characters per chunk")
    chunk_overlap: int = Field(default=100, ge=0, description="Characters shared by neighbouring chunks")

    # Crawling
    crawl_max_pages: int = Field(default=40, gt=0, description="Default page budget for a crawl")
    ingest_max_pages: int = Field(
        default=10,
        gt=0,
        description="Page budget used by ingestion; kept small to bound upload latency",
    )
    request_timeout: float = Field(default=30.0, gt=0, description="Per-request HTTP timeout in seconds")
    user_agent: str = "support-rag-crawler/0.1"

    # Serving
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


# Module-level instance; import `settings` wherever needed.
settings = Settings()
