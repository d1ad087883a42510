"""Shaping of raw faceted aggregations into percentage based analytics."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional
import logging

from ..clients.index import total_hits
from ..core.parties import PartyRegistry
from ..core.types import Bucket, PeopleStats, PercentageEntry, PersonMeta, SummaryResult

LOGGER = logging.getLogger(__name__)

TOP_PEOPLE = 20


def parse_buckets(aggregation: Mapping[str, Any]) -> List[Bucket]:
    """Return the buckets of ``aggregation`` keyed by their formatted key if present."""

    buckets = []
    for raw in aggregation.get("buckets") or ():
        key = raw.get("key_as_string", raw.get("key"))
        buckets.append(Bucket(key=str(key), doc_count=int(raw.get("doc_count") or 0)))
    return buckets


def bucket_counts(buckets: Iterable[Bucket]) -> Dict[str, int]:
    return {bucket.key: bucket.doc_count for bucket in buckets}


def calculate_percentages(
    subset: Mapping[str, float],
    totals: Mapping[str, float],
    *,
    combine_keys: bool = False,
) -> List[PercentageEntry]:
    """Compare subset counts with the corpus counts of the same keys.

    Only keys of ``subset`` are reported unless ``combine_keys`` is set, in
    which case keys that appear only in ``totals`` are reported as well.
    """

    keys = list(subset)
    if combine_keys:
        keys.extend(key for key in totals if key not in subset)

    entries = []
    for key in keys:
        total = totals.get(key, 0)
        count = subset.get(key, 0)
        pct = 0 if total == 0 else count / total * 100
        entries.append(PercentageEntry(key=key, count=count, total=total, pct=pct))
    return entries


def build_person_map(aggregation: Mapping[str, Any]) -> Dict[str, PersonMeta]:
    people: Dict[str, PersonMeta] = {}
    for bucket in aggregation.get("buckets") or ():
        hits = (((bucket.get("person") or {}).get("hits") or {}).get("hits")) or []
        source = hits[0].get("_source", {}) if hits else {}
        people[str(bucket.get("key"))] = PersonMeta(
            external_id=source.get("external_id"),
            party=source.get("party"),
        )
    return people


def _instant(key: str) -> float:
    """Sort key for a timeline bucket, either epoch millis or an ISO date."""

    try:
        return float(key)
    except ValueError:
        pass
    moment = datetime.fromisoformat(key)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.timestamp() * 1000


def _attach_meta(entry: PercentageEntry, meta: Optional[PersonMeta]) -> PercentageEntry:
    if meta is None:
        return entry
    return PercentageEntry(key=entry.key, count=entry.count, total=entry.total, pct=entry.pct, meta=meta)


class AggregationResponseBuilder:
    """Turns a raw aggregation response into a :class:`SummaryResult`."""

    def __init__(self, parties: PartyRegistry, *, top_people: int = TOP_PEOPLE) -> None:
        self._parties = parties
        self._top_people = top_people

    def build_summary(self, response: Mapping[str, Any]) -> SummaryResult:
        aggregations = response.get("aggregations") or {}

        def _facet(name: str, *path: str) -> Mapping[str, Any]:
            node = aggregations.get(name) or {}
            for part in path:
                node = node.get(part) or {}
            return node

        person_map = build_person_map(_facet("filteredPeople", "people"))
        people = [
            _attach_meta(entry, person_map.get(entry.key))
            for entry in calculate_percentages(
                bucket_counts(parse_buckets(_facet("filteredPeople", "people"))),
                bucket_counts(parse_buckets(_facet("people"))),
            )
        ]

        timeline = calculate_percentages(
            bucket_counts(parse_buckets(_facet("filteredTimeline", "timeline"))),
            bucket_counts(parse_buckets(_facet("timeline"))),
            combine_keys=True,
        )
        timeline.sort(key=lambda entry: _instant(entry.key))
        # The first and last periods are incomplete and look misleading.
        timeline = timeline[1:-1]

        parties = [
            entry
            for entry in calculate_percentages(
                bucket_counts(parse_buckets(_facet("filteredParties", "parties"))),
                bucket_counts(parse_buckets(_facet("parties"))),
            )
            if self._parties.is_current(entry.key)
        ]

        LOGGER.debug(
            "Built summary with %s timeline points, %s parties and %s people",
            len(timeline),
            len(parties),
            len(people),
        )
        return SummaryResult(
            total=total_hits(response),
            timeline=tuple(timeline),
            parties=tuple(parties),
            people=PeopleStats(
                by_count=tuple(sorted(people, key=lambda entry: entry.count, reverse=True)[: self._top_people]),
                by_pct=tuple(sorted(people, key=lambda entry: entry.pct, reverse=True)[: self._top_people]),
            ),
        )


__all__ = [
    "AggregationResponseBuilder",
    "TOP_PEOPLE",
    "bucket_counts",
    "build_person_map",
    "calculate_percentages",
    "parse_buckets",
]
