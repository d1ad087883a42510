"""Translation of search options into index request bodies."""
from __future__ import annotations

from typing import Any, Dict

from ..core.types import ALLOWED_INTERVALS, DEFAULT_INTERVAL, SearchOptions

DEFAULT_PAGE_SIZE = 10
DEFAULT_SORT = "_score"
HIGHLIGHT_PRE_TAG = "<mark>"
HIGHLIGHT_POST_TAG = "</mark>"
TEXT_FIELD = "text"

_HISTOGRAM_INTERVALS: Dict[str, Dict[str, str]] = {
    "month": {"calendar_interval": "month"},
    "year": {"calendar_interval": "year"},
    "12w": {"fixed_interval": "84d"},
    "24w": {"fixed_interval": "168d"},
}


def interval_from(options: SearchOptions) -> str:
    """Return the validated timeline interval, defaulting to ``month``."""

    return options.normalized().interval


class QueryBuilder:
    """Builds request bodies for hits, aggregations and context lookups."""

    def __init__(
        self,
        *,
        time_zone: str = "+02:00",
        terms_size: int = 1000,
        presiding_officer: str = "Presidenten",
    ) -> None:
        self._time_zone = time_zone
        self._terms_size = terms_size
        self._presiding_officer = presiding_officer

    def query_for(self, text: str) -> Dict[str, Any]:
        return {
            "query_string": {
                "query": text,
                "default_operator": "AND",
                "default_field": TEXT_FIELD,
            }
        }

    def build_hits_query(self, options: SearchOptions) -> Dict[str, Any]:
        query: Dict[str, Any] = {"must": [self.query_for(options.query)]}
        if not options.include_president:
            query["must_not"] = [{"term": {"name": self._presiding_officer}}]

        return {
            "query": {"bool": query},
            "highlight": {
                "pre_tags": [HIGHLIGHT_PRE_TAG],
                "post_tags": [HIGHLIGHT_POST_TAG],
                "fields": {TEXT_FIELD: {}},
            },
            "size": DEFAULT_PAGE_SIZE if options.size is None else options.size,
            "from": options.start or 0,
            "sort": options.sort or DEFAULT_SORT,
            "track_total_hits": True,
        }

    def build_aggregations_query(self, options: SearchOptions) -> Dict[str, Any]:
        """Baseline facets over the whole corpus plus mirrors filtered by the query.

        Only the filtered speaker facet carries the ``person`` top hit used to
        look up each speaker's external id and party.
        """

        query = self.query_for(options.query)
        timeline = {
            "date_histogram": {
                "field": "time",
                "time_zone": self._time_zone,
                "format": "yyyy-MM-dd",
                **_HISTOGRAM_INTERVALS[interval_from(options)],
            }
        }
        parties = {"terms": {"field": "party", "size": self._terms_size}}
        people = {"terms": {"field": "name", "size": self._terms_size}}

        aggregations = {
            "timeline": timeline,
            "parties": parties,
            "people": people,
            "filteredTimeline": {
                "filter": query,
                "aggs": {"timeline": timeline},
            },
            "filteredParties": {
                "filter": query,
                "aggs": {"parties": parties},
            },
            "filteredPeople": {
                "filter": query,
                "aggs": {
                    "people": {
                        **people,
                        "aggs": {
                            "person": {
                                "top_hits": {
                                    "size": 1,
                                    "_source": {"includes": ["external_id", "party"]},
                                }
                            }
                        },
                    }
                },
            },
        }
        return {"aggs": aggregations, "size": 0, "track_total_hits": True}

    def build_context_query(self, transcript_id: str, start: int, end: int) -> Dict[str, Any]:
        return {
            "query": {
                "bool": {
                    "filter": [
                        {"term": {"transcript": transcript_id}},
                        {"range": {"order": {"gte": start, "lte": end}}},
                    ]
                }
            },
            "size": max(0, end - start + 1),
            "sort": [{"order": "asc"}],
        }


__all__ = ["ALLOWED_INTERVALS", "DEFAULT_INTERVAL", "QueryBuilder", "interval_from"]
