"""Retrieval of the speeches surrounding a speech within its transcript."""
from __future__ import annotations

from typing import List

from ..clients.base import SearchIndex
from ..core.types import Document
from .query import QueryBuilder


class ContextFetcher:
    def __init__(self, index: SearchIndex, queries: QueryBuilder) -> None:
        self._index = index
        self._queries = queries

    async def get_context(self, transcript_id: str, start: int, end: int) -> List[Document]:
        """Return the speeches of ``transcript_id`` ordered from ``start`` to ``end`` inclusive."""

        if end < start:
            return []
        response = await self._index.search(self._queries.build_context_query(transcript_id, start, end))
        hits = (response.get("hits") or {}).get("hits") or []
        return [hit.get("_source") or {} for hit in hits]


__all__ = ["ContextFetcher"]
