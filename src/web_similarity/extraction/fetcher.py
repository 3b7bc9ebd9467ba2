"""Fetching web documents and extracting their words."""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

import httpx
from bs4 import BeautifulSoup

from web_similarity.config import FetchConfig
from web_similarity.errors import FetchError
from web_similarity.extraction.tokenizer import TokenMode, tokenize

logger = logging.getLogger(__name__)

# Elements whose text is never part of the visible document
_INVISIBLE_TAGS = ("script", "style", "noscript", "template")


@runtime_checkable
class DocumentFetcher(Protocol):
    """Turns a document id into its sequence of words, or raises FetchError."""

    async def fetch(self, document_id: str, mode: TokenMode = TokenMode.NON_WORD) -> list[str]: ...


def extract_text(html: str) -> str:
    """Visible text of an HTML page, whitespace-joined."""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(_INVISIBLE_TAGS):
        tag.decompose()
    return soup.get_text(" ", strip=True)


class HttpDocumentFetcher:
    """
    Fetch collaborator backed by httpx.

    Document ids are URLs. A shared client can be injected (and is then
    owned by the caller); otherwise a short-lived client is opened per
    fetch.
    """

    def __init__(
        self,
        config: FetchConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config or FetchConfig()
        self._client = client

    def _new_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._config.timeout_seconds,
            follow_redirects=self._config.follow_redirects,
            headers={"User-Agent": self._config.user_agent},
        )

    async def _get(self, client: httpx.AsyncClient, url: str) -> httpx.Response:
        resp = await client.get(url)
        resp.raise_for_status()
        return resp

    async def fetch_text(self, url: str) -> str:
        """
        Download ``url`` and return its visible text.

        Raises:
            FetchError: On malformed URLs, transport errors, timeouts and
                non-2xx responses
        """
        try:
            if self._client is not None:
                resp = await self._get(self._client, url)
            else:
                async with self._new_client() as client:
                    resp = await self._get(client, url)
        except httpx.HTTPStatusError as e:
            raise FetchError(url, f"HTTP {e.response.status_code}") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise FetchError(url, str(e) or type(e).__name__) from e

        text = extract_text(resp.text)
        if not text:
            logger.warning("No content extracted from %s", url)
        else:
            logger.debug("Extracted %d characters from %s", len(text), url)
        return text

    async def fetch(self, document_id: str, mode: TokenMode = TokenMode.NON_WORD) -> list[str]:
        text = await self.fetch_text(document_id)
        words = tokenize(text, mode)
        logger.debug("Extracted %d words from %s", len(words), document_id)
        return words
