"""Asynchronous client pulling and pushing whole word-book documents."""
from __future__ import annotations

from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx
from loguru import logger

from wordbook.config import settings
from wordbook.core.migration import normalize
from wordbook.core.model import WordBook, WordBookOverview
from wordbook.core.store import WordBookStore
from wordbook.utils.exceptions import SyncError


def _overview(item: Dict[str, Any]) -> WordBookOverview:
    return WordBookOverview(
        id=str(item["id"]),
        name=str(item.get("name") or item["id"]),
        word_count=int(item.get("wordCount", 0)),
        version=int(item.get("version") or 0),
    )


def _book_path(book_id: str) -> str:
    return f"/books/{quote(str(book_id), safe='')}"


class WordBookClient:
    """Talk to the word-book REST API.

    Every failure (transport error, non-2xx status, undecodable body or an
    ``error`` envelope) is raised as :class:`SyncError`; nothing is retried.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        api_prefix: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = str(base_url or settings.API_BASE_URL).rstrip("/")
        self.api_prefix = settings.API_PREFIX if api_prefix is None else api_prefix
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout or settings.REQUEST_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def __aenter__(self) -> "WordBookClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self.api_prefix}{path}"
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("Word book request failed", method=method, url=url, error=str(exc))
            raise SyncError(f"{method} {url} failed: {exc}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            logger.warning("Word book server sent invalid JSON", url=url, status=response.status_code)
            raise SyncError("invalid response body", status_code=response.status_code) from exc

        if response.status_code >= 400 or not isinstance(payload, dict) or payload.get("status") != "ok":
            error = payload.get("error") if isinstance(payload, dict) else payload
            logger.warning(
                "Word book server returned error", url=url, status=response.status_code, error=error
            )
            raise SyncError(
                f"{method} {url} returned {response.status_code}",
                {"error": error},
                status_code=response.status_code,
            )
        return payload.get("data")

    async def ping(self) -> str:
        return await self._request("GET", "/ping")

    async def list_overviews(self) -> List[WordBookOverview]:
        """Return the book list as sent by the server (newest first)."""

        data = await self._request("GET", "/books")
        return [_overview(item) for item in data or []]

    async def pull(self, book_id: str) -> WordBook:
        """Fetch a single book and normalise it before handing it out."""

        data = await self._request("GET", _book_path(book_id))
        return normalize(data, book_id=book_id)

    async def push(self, book: WordBook) -> str:
        """Send the entire book; returns the id the server stored it under."""

        data = await self._request("POST", _book_path(book.id), json=book.to_dict())
        return str((data or {}).get("id", book.id))

    async def create(
        self, template_id: Optional[str], name: str, words_ratio: float = 100
    ) -> WordBookOverview:
        """Create a book from a template and return its list entry."""

        payload = {"templateId": template_id, "name": name, "wordsRatio": words_ratio}
        data = await self._request("POST", "/books", json=payload)
        book_id = str(data["id"])
        for overview in await self.list_overviews():
            if overview.id == book_id:
                return overview
        return WordBookOverview(id=book_id, name=data.get("name") or name, word_count=0, version=0)

    async def remove(self, book_id: str) -> None:
        await self._request("DELETE", _book_path(book_id))

    async def download(self, store: WordBookStore, book_id: str) -> WordBook:
        """Pull ``book_id`` into ``store``; the store is untouched on failure."""

        book = await self.pull(book_id)
        store.replace(book)
        return book

    async def upload(self, store: WordBookStore) -> str:
        """Push the store's book and clear its dirty flag on success.

        The flag is only cleared when the book did not change while the
        request was in flight. On failure it stays set so a later upload can
        retry.
        """

        version = store.book.version
        try:
            book_id = await self.push(store.book)
        except SyncError:
            logger.warning("Upload failed, book stays dirty", book_id=store.book.id)
            raise
        store.mark_clean(version)
        logger.info("Uploaded word book", book_id=book_id, version=version)
        return book_id
