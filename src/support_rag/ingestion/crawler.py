"""Same-origin web crawler used to ingest a website.

The crawl is depth-first: every link found on a page is explored fully
before its next sibling, exactly like a recursive walk, but the frontier
is an explicit stack so large sites cannot exhaust the interpreter's
recursion limit. ``max_pages`` bounds the number of *visited* URLs, not
the breadth of the crawl, so a deep branch can consume the whole budget.

Two collaborators do the network work and can be swapped in tests:

* :class:`PageTextExtractor` — page URL → Documents built from a fixed
  allow-list of text tags.
* :class:`RawFetcher` — page URL → raw HTML, used only to discover links.

A failure in either one is logged and only affects the current page.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from urllib.parse import urljoin, urlsplit

import requests
from bs4 import BeautifulSoup
from langchain_core.documents import Document

from support_rag.config import settings
from support_rag.exceptions import FetchFailure

logger = logging.getLogger(__name__)

# Tags whose text makes up a page's content.
TEXT_SELECTOR = "p, h1, h2, h3, li, a, span"
DEFAULT_PORTS = {"http": 80, "https": 443}


def _new_session() -> requests.Session:
    session = requests.Session()
    session.headers["User-Agent"] = settings.user_agent
    return session


def _get(session: requests.Session, url: str, timeout: float) -> requests.Response:
    """GET *url*, turning every transport or HTTP error into :class:`FetchFailure`."""
    try:
        resp = session.get(url, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as exc:
        raise FetchFailure(url, str(exc)) from exc
    return resp


def _normalise(text: str) -> str:
    text = re.sub(r"[^\S\n]+", " ", text)       # collapse spaces (keep \n)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def origin_of(url: str) -> str:
    """Return the ``scheme://host[:port]`` origin of *url*.

    User info is dropped and the scheme's default port is omitted, so
    ``https://user@site.test:443/`` and ``https://site.test/`` share an
    origin. The host keeps its case. Returns ``""`` for URLs without a
    scheme or host.
    """
    parts = urlsplit(url)
    if not parts.scheme or not parts.netloc:
        return ""
    hostport = parts.netloc.rpartition("@")[2]
    if hostport.startswith("["):
        host = hostport[: hostport.find("]") + 1]
    else:
        host = hostport.partition(":")[0]
    if not host:
        return ""
    try:
        port = parts.port
    except ValueError:
        return ""
    if port is None or port == DEFAULT_PORTS.get(parts.scheme):
        return f"{parts.scheme}://{host}"
    return f"{parts.scheme}://{host}:{port}"


class PageTextExtractor:
    """Fetch a page and keep only the text of :data:`TEXT_SELECTOR` tags."""

    def __init__(
        self,
        session: requests.Session | None = None,
        *,
        selector: str = TEXT_SELECTOR,
        timeout: float = settings.request_timeout,
    ) -> None:
        self._session = session or _new_session()
        self.selector = selector
        self.timeout = timeout

    def extract(self, url: str) -> list[Document]:
        """Return zero or one Document holding the page's allow-listed text."""
        resp = _get(self._session, url, self.timeout)
        soup = BeautifulSoup(resp.text, "html.parser")

        pieces = [el.get_text(" ", strip=True) for el in soup.select(self.selector)]
        text = _normalise("\n".join(p for p in pieces if p))
        if not text:
            logger.info("No text content on %s", url)
            return []

        title = soup.title.string.strip() if soup.title and soup.title.string else ""
        return [Document(page_content=text, metadata={"source": url, "title": title})]


class RawFetcher:
    """Fetch raw HTML for link discovery."""

    def __init__(
        self,
        session: requests.Session | None = None,
        *,
        timeout: float = settings.request_timeout,
    ) -> None:
        self._session = session or _new_session()
        self.timeout = timeout

    def fetch(self, url: str) -> str:
        return _get(self._session, url, self.timeout).text


def extract_links(html: str, page_url: str, allowed_origin: str) -> list[str]:
    """Return absolute ``a[href]`` targets of *html* that stay on *allowed_origin*.

    Links are resolved against *page_url*. Malformed links and links on
    any other origin are dropped. Document order is preserved and
    duplicates are kept; the crawler's visited set handles those.
    """
    soup = BeautifulSoup(html, "html.parser")
    links: list[str] = []
    for anchor in soup.select("a[href]"):
        href = anchor.get("href", "").strip()
        if not href:
            continue
        try:
            absolute = urljoin(page_url, href)
            link_origin = origin_of(absolute)
        except ValueError:
            logger.debug("Discarding malformed link %r on %s", href, page_url)
            continue
        if link_origin and link_origin == allowed_origin:
            links.append(absolute)
    return links


@dataclass
class CrawlState:
    """Book-keeping for a single :meth:`WebCrawler.crawl` call."""

    max_pages: int
    visited: set[str] = field(default_factory=set)
    frontier: list[str] = field(default_factory=list)

    @property
    def exhausted(self) -> bool:
        return len(self.visited) >= self.max_pages


class WebCrawler:
    """Bounded, deduplicated, same-origin depth-first crawler.

    Parameters
    ----------
    extractor:
        Produces Documents for a page. Defaults to :class:`PageTextExtractor`.
    fetcher:
        Produces raw HTML for link discovery. Defaults to :class:`RawFetcher`.
    """

    def __init__(
        self,
        extractor: PageTextExtractor | None = None,
        fetcher: RawFetcher | None = None,
    ) -> None:
        if extractor is None or fetcher is None:
            session = _new_session()
            extractor = extractor or PageTextExtractor(session)
            fetcher = fetcher or RawFetcher(session)
        self._extractor = extractor
        self._fetcher = fetcher

    def crawl(self, start_url: str, max_pages: int = settings.crawl_max_pages) -> list[Document]:
        """Crawl from *start_url* and return every extracted Document.

        Parameters
        ----------
        start_url:
            First page to visit; its origin bounds the whole crawl.
        max_pages:
            Maximum number of URLs visited.

        Returns
        -------
        list[Document]
            Documents in visitation order. A URL is visited at most once.
        """
        start_origin = origin_of(start_url)
        state = CrawlState(max_pages=max_pages, frontier=[start_url])
        documents: list[Document] = []

        while state.frontier:
            if state.exhausted:
                break
            url = state.frontier.pop()
            if url in state.visited:
                continue
            state.visited.add(url)

            try:
                page_docs = self._extractor.extract(url)
                documents.extend(page_docs)
                logger.debug("Extracted %d document(s) from %s", len(page_docs), url)
            except FetchFailure as exc:
                logger.warning("Failed to load %s: %s", url, exc.reason)

            try:
                html = self._fetcher.fetch(url)
            except FetchFailure as exc:
                logger.warning("Failed to fetch links from %s: %s", url, exc.reason)
                continue

            links = extract_links(html, url, start_origin)
            # Reversed so the first link on the page is explored first.
            state.frontier.extend(reversed(links))

        logger.info(
            "Crawl of %s visited %d page(s), collected %d document(s)",
            start_url,
            len(state.visited),
            len(documents),
        )
        return documents
