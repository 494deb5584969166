"""Shared pytest configuration and fixtures."""

from __future__ import annotations

from typing import Any

import pytest
from langchain_core.documents import Document

from support_rag.exceptions import FetchFailure, RetrievalError
from support_rag.ingestion.crawler import PageTextExtractor, RawFetcher, WebCrawler
from support_rag.retrieval.base import VectorStoreBase
from support_rag.retrieval.models import MetadataFilter


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring external services")


class FakeVectorStore(VectorStoreBase):
    """In-memory store that returns stored chunks in insertion order.

    ``fail_filtered`` makes every filtered search raise, ``fail_all`` makes
    every search raise.
    """

    def __init__(
        self,
        *,
        fail_filtered: bool = False,
        fail_all: bool = False,
    ) -> None:
        super().__init__("test-collection")
        self.entries: dict[str, Document] = {}
        self.add_calls: list[tuple[list[Document], list[str]]] = []
        self.searches: list[dict[str, Any]] = []
        self.fail_filtered = fail_filtered
        self.fail_all = fail_all

    def add_documents(self, documents: list[Document], ids: list[str]) -> None:
        self.add_calls.append((list(documents), list(ids)))
        for doc_id, doc in zip(ids, documents):
            self.entries[doc_id] = doc

    def similarity_search(
        self,
        query: str,
        *,
        k: int = 4,
        filters: list[MetadataFilter] | None = None,
    ) -> list[Document]:
        self.searches.append({"query": query, "k": k, "filters": filters})
        if self.fail_all or (filters and self.fail_filtered):
            raise RetrievalError("where clause rejected")
        return list(self.entries.values())[:k]

    def health_check(self) -> bool:
        return True


class FakeSite:
    """Pages keyed by absolute URL, each holding a list of raw hrefs."""

    def __init__(
        self,
        pages: dict[str, list[str]],
        *,
        broken_text: set[str] | None = None,
        broken_html: set[str] | None = None,
    ) -> None:
        self.pages = pages
        self.broken_text = broken_text or set()
        self.broken_html = broken_html or set()


class FakeExtractor(PageTextExtractor):
    def __init__(self, site: FakeSite) -> None:
        self.site = site
        self.calls: list[str] = []

    def extract(self, url: str) -> list[Document]:
        self.calls.append(url)
        if url in self.site.broken_text or url not in self.site.pages:
            raise FetchFailure(url, "404 Client Error")
        return [Document(page_content=f"text of {url}", metadata={"source": url})]


class FakeFetcher(RawFetcher):
    def __init__(self, site: FakeSite) -> None:
        self.site = site
        self.calls: list[str] = []

    def fetch(self, url: str) -> str:
        self.calls.append(url)
        if url in self.site.broken_html or url not in self.site.pages:
            raise FetchFailure(url, "connection reset")
        anchors = "".join(f'<a href="{href}">link</a>' for href in self.site.pages[url])
        return f"<html><body>{anchors}</body></html>"


@pytest.fixture()
def site_crawler():
    """Factory: in-memory site pages -> (crawler, extractor, fetcher)."""

    def _make(pages: dict[str, list[str]], **broken: set[str]) -> tuple[WebCrawler, FakeExtractor, FakeFetcher]:
        site = FakeSite(pages, **broken)
        extractor, fetcher = FakeExtractor(site), FakeFetcher(site)
        return WebCrawler(extractor=extractor, fetcher=fetcher), extractor, fetcher

    return _make


@pytest.fixture()
def fake_store() -> FakeVectorStore:
    return FakeVectorStore()


@pytest.fixture()
def make_store():
    """Factory fixture for stores with failure switches."""
    return FakeVectorStore


@pytest.fixture()
def sample_chunks() -> list[Document]:
    return [
        Document(page_content="Our support desk is open 9am to 5pm.", metadata={"source": "https://shop.test/help"}),
        Document(page_content="Returns are accepted within 30 days.", metadata={"source": "https://shop.test/returns"}),
        Document(page_content="Shipping is free above 50 EUR.", metadata={"source": "https://shop.test/shipping"}),
    ]
