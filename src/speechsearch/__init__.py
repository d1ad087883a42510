"""Aggregated search, hit lists and exports over parliamentary speech transcripts."""
from __future__ import annotations

from .clients import IndexClient, SearchIndex
from .config import AppConfig, CacheConfig, IndexConfig, SearchConfig, load_config
from .core import (
    Hit,
    HitsResult,
    InvalidIntervalError,
    NotFoundError,
    PartyRegistry,
    PercentageEntry,
    PersonMeta,
    SearchOptions,
    SpeechSearchError,
    SummaryResult,
    UpstreamQueryError,
)
from .runtime import ServiceResources, create_service
from .search import QueryBuilder, ResultCache, SearchService

__all__ = [
    "AppConfig",
    "CacheConfig",
    "Hit",
    "HitsResult",
    "IndexClient",
    "IndexConfig",
    "InvalidIntervalError",
    "NotFoundError",
    "PartyRegistry",
    "PercentageEntry",
    "PersonMeta",
    "QueryBuilder",
    "ResultCache",
    "SearchConfig",
    "SearchIndex",
    "SearchOptions",
    "SearchService",
    "ServiceResources",
    "SpeechSearchError",
    "SummaryResult",
    "UpstreamQueryError",
    "create_service",
    "load_config",
]
