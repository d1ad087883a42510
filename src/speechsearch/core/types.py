"""Typed domain objects shared by the search components."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from typing import Any, Dict, Mapping, Optional, Tuple
import json
import logging

from .errors import InvalidIntervalError

LOGGER = logging.getLogger(__name__)

DEFAULT_INTERVAL = "month"
# Anything finer grained than this produces huge timelines.
ALLOWED_INTERVALS: Tuple[str, ...] = ("month", "12w", "24w", "year")

Document = Dict[str, Any]

_OPTION_ALIASES = {
    "query": "query",
    "interval": "interval",
    "include_president": "include_president",
    "includePresident": "include_president",
    "size": "size",
    "start": "start",
    "sort": "sort",
}


def _parse_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"true", "1", "yes", "y", "on"}
    return bool(value)


def _parse_count(name: str, value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid value for {name}: {value!r}") from exc
    if number < 0:
        raise ValueError(f"{name} must not be negative, got {number}")
    return number


@dataclass(frozen=True, slots=True)
class SearchOptions:
    """User facing search parameters.

    Only the fields listed here are recognised. :meth:`from_mapping` ignores
    any other key, so request objects may carry unrelated parameters.
    """

    query: str = ""
    interval: Optional[str] = None
    include_president: bool = False
    size: Optional[int] = None
    start: Optional[int] = None
    sort: Optional[str] = None

    def __post_init__(self) -> None:
        for name in ("size", "start"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ValueError(f"{name} must not be negative, got {value}")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SearchOptions":
        """Build options from a loosely typed mapping such as query parameters."""

        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            name = _OPTION_ALIASES.get(key)
            if name is None:
                LOGGER.debug("Ignoring unknown search option %r", key)
                continue
            kwargs[name] = value

        return cls(
            query=str(kwargs.get("query") or ""),
            interval=kwargs.get("interval") or None,
            include_president=_parse_flag(kwargs.get("include_president", False)),
            size=_parse_count("size", kwargs.get("size")),
            start=_parse_count("start", kwargs.get("start")),
            sort=kwargs.get("sort") or None,
        )

    def with_changes(self, **changes: Any) -> "SearchOptions":
        return replace(self, **changes)

    def normalized(self) -> "SearchOptions":
        """Return these options with the timeline interval defaulted and validated."""

        interval = self.interval or DEFAULT_INTERVAL
        if interval not in ALLOWED_INTERVALS:
            raise InvalidIntervalError(interval)
        return replace(self, interval=interval)

    def cache_key(self) -> str:
        """Canonical serialisation; equal options always give equal keys."""

        return json.dumps(asdict(self), sort_keys=True, separators=(",", ":"))


@dataclass(frozen=True, slots=True)
class Bucket:
    """Raw document count of a single facet value."""

    key: str
    doc_count: int


@dataclass(frozen=True, slots=True)
class PersonMeta:
    """Metadata of one speaker taken from a representative document."""

    external_id: Optional[str]
    party: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {"external_id": self.external_id, "party": self.party}


@dataclass(frozen=True, slots=True)
class PercentageEntry:
    """Count of a facet value in the query subset compared with the corpus."""

    key: str
    count: float
    total: float
    pct: float
    meta: Optional[PersonMeta] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "key": self.key,
            "count": self.count,
            "total": self.total,
            "pct": self.pct,
        }
        if self.meta is not None:
            data["meta"] = self.meta.to_dict()
        return data


@dataclass(frozen=True, slots=True)
class PeopleStats:
    by_count: Tuple[PercentageEntry, ...] = ()
    by_pct: Tuple[PercentageEntry, ...] = ()


@dataclass(frozen=True, slots=True)
class SummaryResult:
    """Faceted breakdown of how a query is distributed over the corpus."""

    total: int
    timeline: Tuple[PercentageEntry, ...] = ()
    parties: Tuple[PercentageEntry, ...] = ()
    people: PeopleStats = field(default_factory=PeopleStats)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "counts": {"total": self.total},
            "timeline": [entry.to_dict() for entry in self.timeline],
            "parties": [entry.to_dict() for entry in self.parties],
            "people": {
                "count": [entry.to_dict() for entry in self.people.by_count],
                "pct": [entry.to_dict() for entry in self.people.by_pct],
            },
        }


@dataclass(frozen=True, slots=True)
class Hit:
    """A ranked speech including its highlighted snippet."""

    id: str
    score: Optional[float]
    highlight: str
    source: Document = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.id, "score": self.score, "highlight": self.highlight}
        data.update(self.source)
        return data


@dataclass(frozen=True, slots=True)
class HitsResult:
    """One page of ranked speeches for a query."""

    query: str
    hits: Tuple[Hit, ...]
    total: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "query": self.query,
            "hits": [hit.to_dict() for hit in self.hits],
            "counts": {"total": self.total},
        }


__all__ = [
    "ALLOWED_INTERVALS",
    "Bucket",
    "DEFAULT_INTERVAL",
    "Document",
    "Hit",
    "HitsResult",
    "PeopleStats",
    "PercentageEntry",
    "PersonMeta",
    "SearchOptions",
    "SummaryResult",
]
