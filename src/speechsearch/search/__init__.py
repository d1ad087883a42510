"""Query building, caching and response shaping for speech searches."""
from __future__ import annotations

from .aggregations import AggregationResponseBuilder, calculate_percentages
from .cache import ResultCache
from .context import ContextFetcher
from .export import TSV_HEADERS, TsvExporter
from .hits import build_hits
from .query import ALLOWED_INTERVALS, QueryBuilder, interval_from
from .service import SearchService

__all__ = [
    "ALLOWED_INTERVALS",
    "AggregationResponseBuilder",
    "ContextFetcher",
    "QueryBuilder",
    "ResultCache",
    "SearchService",
    "TSV_HEADERS",
    "TsvExporter",
    "build_hits",
    "calculate_percentages",
    "interval_from",
]
