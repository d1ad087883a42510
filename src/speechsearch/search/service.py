"""Facade answering summary, hit list, export and context requests."""
from __future__ import annotations

from typing import AsyncIterator, List, Optional
import logging

from ..clients.base import SearchIndex
from ..core.parties import PartyRegistry
from ..core.types import Document, HitsResult, SearchOptions, SummaryResult
from .aggregations import AggregationResponseBuilder
from .cache import ResultCache
from .context import ContextFetcher
from .export import TsvExporter
from .hits import build_hits
from .query import QueryBuilder

LOGGER = logging.getLogger(__name__)


class SearchService:
    """Entry point used by the presentation layer.

    ``summary`` and ``hits`` are cached; exports and single document lookups
    always go to the index.
    """

    def __init__(
        self,
        index: SearchIndex,
        *,
        cache: Optional[ResultCache] = None,
        queries: Optional[QueryBuilder] = None,
        parties: Optional[PartyRegistry] = None,
        export_page_size: int = 100,
    ) -> None:
        self._index = index
        self._cache = cache if cache is not None else ResultCache()
        self._queries = queries or QueryBuilder()
        self._aggregations = AggregationResponseBuilder(parties or PartyRegistry())
        self._exporter = TsvExporter(index, self._queries, page_size=export_page_size)
        self._context = ContextFetcher(index, self._queries)

    @property
    def cache(self) -> ResultCache:
        return self._cache

    async def summary(self, options: SearchOptions) -> SummaryResult:
        options = options.normalized()

        async def _fetch() -> SummaryResult:
            response = await self._index.search(self._queries.build_aggregations_query(options))
            return self._aggregations.build_summary(response)

        return await self._cache.cached("summary", options, _fetch)

    async def hits(self, options: SearchOptions) -> HitsResult:
        options = options.normalized()

        async def _fetch() -> HitsResult:
            response = await self._index.search(self._queries.build_hits_query(options))
            return build_hits(response, options)

        return await self._cache.cached("hits", options, _fetch)

    def export_tsv(self, options: SearchOptions, *, page_size: Optional[int] = None) -> AsyncIterator[bytes]:
        """Stream every match of ``options.query`` as UTF-8 encoded TSV lines."""

        LOGGER.info("Starting TSV export for query %r", options.query)
        return self._exporter.stream(options, page_size=page_size)

    async def get_speech(self, identifier: str) -> Document:
        return await self._index.get(identifier)

    async def get_context(self, transcript_id: str, start: int, end: int) -> List[Document]:
        return await self._context.get_context(transcript_id, start, end)


__all__ = ["SearchService"]
