"""Core domain entities used across the search service."""
from __future__ import annotations

from .errors import InvalidIntervalError, NotFoundError, SpeechSearchError, UpstreamQueryError
from .parties import DEFAULT_CURRENT_PARTIES, PartyRegistry
from .types import (
    ALLOWED_INTERVALS,
    DEFAULT_INTERVAL,
    Bucket,
    Document,
    Hit,
    HitsResult,
    PeopleStats,
    PercentageEntry,
    PersonMeta,
    SearchOptions,
    SummaryResult,
)

__all__ = [
    "ALLOWED_INTERVALS",
    "Bucket",
    "DEFAULT_INTERVAL",
    "DEFAULT_CURRENT_PARTIES",
    "Document",
    "Hit",
    "HitsResult",
    "InvalidIntervalError",
    "NotFoundError",
    "PartyRegistry",
    "PeopleStats",
    "PercentageEntry",
    "PersonMeta",
    "SearchOptions",
    "SpeechSearchError",
    "SummaryResult",
    "UpstreamQueryError",
]
