"""Streaming export of every speech matching a query as TSV."""
from __future__ import annotations

import csv
import io
from typing import Any, AsyncIterator, Iterable, List, Mapping, Optional, Sequence
import logging

from ..clients.base import SearchIndex
from ..clients.index import total_hits
from ..core.types import SearchOptions
from .query import QueryBuilder

LOGGER = logging.getLogger(__name__)

TSV_HEADERS: Sequence[str] = (
    "transcript",
    "order",
    "session",
    "time",
    "presidents",
    "title",
    "name",
    "party",
    "text",
)
PRESIDENTS_DELIMITER = ","


def project_row(source: Mapping[str, Any]) -> List[Any]:
    """Pick the export columns of one speech, flattening the presidents list."""

    row = []
    for column in TSV_HEADERS:
        value = source.get(column)
        if column == "presidents" and isinstance(value, (list, tuple)):
            value = PRESIDENTS_DELIMITER.join(str(item) for item in value)
        row.append("" if value is None else value)
    return row


def format_row(values: Iterable[Any]) -> bytes:
    buffer = io.StringIO()
    csv.writer(buffer, delimiter="\t", lineterminator="\n").writerow(values)
    return buffer.getvalue().encode("utf8")


class TsvExporter:
    """Pages through all hits for a query and yields them as TSV lines.

    The next page is only requested once the consumer has taken every row of
    the previous one. Closing the iterator stops paging.
    """

    def __init__(self, index: SearchIndex, queries: QueryBuilder, *, page_size: int = 100) -> None:
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        self._index = index
        self._queries = queries
        self._page_size = page_size

    async def iter_sources(self, options: SearchOptions, page_size: int) -> AsyncIterator[Mapping[str, Any]]:
        start = 0
        while True:
            body = self._queries.build_hits_query(options.with_changes(start=start, size=page_size))
            LOGGER.debug("Fetching export page at offset %s", start)
            response = await self._index.search(body)
            hits = (response.get("hits") or {}).get("hits") or []
            for hit in hits:
                yield hit.get("_source") or {}
            start += len(hits)
            total = total_hits(response)
            if len(hits) < page_size or (total and start >= total):
                break

    async def stream(self, options: SearchOptions, page_size: Optional[int] = None) -> AsyncIterator[bytes]:
        page_size = page_size or options.size or self._page_size
        rows = 0
        sources = self.iter_sources(options, page_size)
        try:
            yield format_row(TSV_HEADERS)
            async for source in sources:
                yield format_row(project_row(source))
                rows += 1
        finally:
            await sources.aclose()
            LOGGER.info("Exported %s speeches for query %r", rows, options.query)


__all__ = ["PRESIDENTS_DELIMITER", "TSV_HEADERS", "TsvExporter", "format_row", "project_row"]
