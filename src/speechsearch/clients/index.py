"""Asynchronous HTTP client for the Elasticsearch transcript index."""

from __future__ import annotations

from typing import Any, Dict, Optional
from urllib.parse import quote
import logging

import httpx

from ..core.errors import NotFoundError, UpstreamQueryError
from ..core.types import Document

LOGGER = logging.getLogger(__name__)


def total_hits(response: Dict[str, Any]) -> int:
    """Return the total match count of a search response.

    Older indices report ``hits.total`` as a plain integer, newer ones as an
    object with a ``value`` field.
    """

    total = (response.get("hits") or {}).get("total") or 0
    if isinstance(total, dict):
        total = total.get("value") or 0
    return int(total)


class IndexClient:
    """Minimal client for searching and fetching speech documents."""

    def __init__(
        self,
        base_url: str,
        index_name: str,
        *,
        api_key: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._index_name = index_name
        self._api_key = api_key
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    @property
    def index_name(self) -> str:
        return self._index_name

    # --- public API -----------------------------------------------------
    async def search(self, body: Dict[str, Any]) -> Dict[str, Any]:
        """Run a search request against the transcript index."""

        return await self._request("POST", f"/{self._index_name}/_search", json=body)

    async def get(self, identifier: str) -> Document:
        """Fetch the stored fields of a single speech."""

        try:
            data = await self._request("GET", f"/{self._index_name}/_doc/{quote(identifier, safe='')}")
        except UpstreamQueryError as exc:
            if exc.status_code == 404:
                raise NotFoundError(identifier) from exc
            raise
        if not data.get("found", True) or "_source" not in data:
            raise NotFoundError(identifier)
        return data["_source"]

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""

        await self._client.aclose()

    async def __aenter__(self) -> "IndexClient":  # pragma: no cover - trivial
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # pragma: no cover - trivial
        await self.aclose()

    # --- helpers --------------------------------------------------------
    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"ApiKey {self._api_key}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        url = f"{self._base_url}{path}"
        LOGGER.debug("%s %s", method, url)
        try:
            response = await self._client.request(method, url, headers=self._headers(), json=json)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            if status != 404:
                LOGGER.warning("Index returned status %s for %s %s", status, method, url)
            raise UpstreamQueryError(
                f"Index rejected {method} {path} with status {status}",
                status_code=status,
            ) from exc
        except httpx.HTTPError as exc:
            LOGGER.warning("HTTP error while requesting %s %s: %s", method, url, exc)
            raise UpstreamQueryError(f"Failed to request {url}") from exc
        except ValueError as exc:
            LOGGER.warning("Index returned a malformed body for %s %s", method, url)
            raise UpstreamQueryError(f"Malformed response from {url}") from exc


__all__ = ["IndexClient", "total_hits"]
