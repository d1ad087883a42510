"""Interface the search components expect from an index backend."""
from __future__ import annotations

from typing import Any, Dict, Protocol

from ..core.types import Document


class SearchIndex(Protocol):
    """Black-box document store with search and lookup by id."""

    async def search(self, body: Dict[str, Any]) -> Dict[str, Any]:
        """Execute a search or aggregation request and return the raw response."""

    async def get(self, identifier: str) -> Document:
        """Return the stored fields of one document or raise ``NotFoundError``."""


__all__ = ["SearchIndex"]
