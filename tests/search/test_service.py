import asyncio
import json

import pytest

from speechsearch.core import (
    InvalidIntervalError,
    NotFoundError,
    PartyRegistry,
    SearchOptions,
    UpstreamQueryError,
)
from speechsearch.search import ResultCache, SearchService


def aggregation_response():
    def dated(counts):
        return {"buckets": [{"key_as_string": k, "key": 0, "doc_count": v} for k, v in counts.items()]}

    def terms(counts):
        return {"buckets": [{"key": k, "doc_count": v} for k, v in counts.items()]}

    timeline = {"2014-01-01": 10, "2015-01-01": 20, "2016-01-01": 30, "2017-01-01": 5}
    return {
        "hits": {"total": {"value": 65, "relation": "eq"}, "hits": []},
        "aggregations": {
            "timeline": dated(timeline),
            "parties": terms({"A": 40, "H": 20, "DNA": 5}),
            "people": terms({"Kari Nordmann": 30}),
            "filteredTimeline": {"timeline": dated({"2015-01-01": 2, "2016-01-01": 3})},
            "filteredParties": {"parties": terms({"A": 4, "DNA": 1})},
            "filteredPeople": {
                "people": {
                    "buckets": [
                        {
                            "key": "Kari Nordmann",
                            "doc_count": 3,
                            "person": {"hits": {"hits": [{"_source": {"external_id": "KANO", "party": "A"}}]}},
                        }
                    ]
                }
            },
        },
    }


class FakeIndex:
    def __init__(self, *, documents=None, error=None):
        self.searches = []
        self._documents = documents or {}
        self._error = error

    async def search(self, body):
        self.searches.append(body)
        if self._error is not None:
            raise self._error
        if "aggs" in body:
            return aggregation_response()
        return {
            "hits": {
                "total": {"value": 1, "relation": "eq"},
                "hits": [
                    {
                        "_id": "s1",
                        "_score": 4.2,
                        "_source": {"name": "Kari Nordmann", "text": "om oljefondet"},
                        "highlight": {"text": ["om <mark>oljefondet</mark>"]},
                    }
                ],
            }
        }

    async def get(self, identifier):
        try:
            return self._documents[identifier]
        except KeyError:
            raise NotFoundError(identifier) from None


def make_service(index, **kwargs):
    return SearchService(index, cache=ResultCache(), parties=PartyRegistry(["A", "H"]), **kwargs)


def test_summary_is_cached_and_identical():
    index = FakeIndex()
    service = make_service(index)

    async def scenario():
        first = await service.summary(SearchOptions(query="oljefondet"))
        second = await service.summary(SearchOptions(query="oljefondet"))
        return first, second

    first, second = asyncio.run(scenario())

    assert json.dumps(first.to_dict(), sort_keys=True) == json.dumps(second.to_dict(), sort_keys=True)
    assert len(index.searches) == 1
    assert [entry.key for entry in first.timeline] == ["2015-01-01", "2016-01-01"]
    assert [entry.key for entry in first.parties] == ["A"]
    assert first.people.by_count[0].meta.external_id == "KANO"
    assert first.total == 65


def test_summary_fills_default_interval_into_cache_key():
    index = FakeIndex()
    service = make_service(index)

    async def scenario():
        await service.summary(SearchOptions(query="a"))
        await service.summary(SearchOptions(query="a", interval="month"))

    asyncio.run(scenario())

    assert len(index.searches) == 1


def test_different_queries_hit_the_index_separately():
    index = FakeIndex()
    service = make_service(index)

    async def scenario():
        await service.summary(SearchOptions(query="a"))
        await service.summary(SearchOptions(query="b"))

    asyncio.run(scenario())

    assert len(index.searches) == 2


def test_invalid_interval_is_rejected_before_any_request():
    index = FakeIndex()
    service = make_service(index)

    with pytest.raises(InvalidIntervalError):
        asyncio.run(service.summary(SearchOptions(query="a", interval="week")))
    assert index.searches == []


def test_yearly_interval_is_accepted():
    index = FakeIndex()
    service = make_service(index)

    asyncio.run(service.summary(SearchOptions(query="a", interval="year")))

    assert index.searches[0]["aggs"]["timeline"]["date_histogram"]["calendar_interval"] == "year"


def test_hits_are_cached():
    index = FakeIndex()
    service = make_service(index)

    async def scenario():
        first = await service.hits(SearchOptions(query="oljefondet"))
        second = await service.hits(SearchOptions(query="oljefondet"))
        return first, second

    first, second = asyncio.run(scenario())

    assert first == second
    assert len(index.searches) == 1
    assert first.hits[0].highlight == "om <mark>oljefondet</mark>"
    assert first.to_dict()["hits"][0]["name"] == "Kari Nordmann"


def test_upstream_failure_propagates_and_is_not_cached():
    error = UpstreamQueryError("index unavailable", status_code=503)
    index = FakeIndex(error=error)
    service = make_service(index)

    for _ in range(2):
        with pytest.raises(UpstreamQueryError) as excinfo:
            asyncio.run(service.summary(SearchOptions(query="a")))
        assert excinfo.value is error

    assert len(index.searches) == 2
    assert len(service.cache) == 0


def test_get_speech_and_missing_speech():
    service = make_service(FakeIndex(documents={"s1": {"name": "Kari Nordmann"}}))

    assert asyncio.run(service.get_speech("s1")) == {"name": "Kari Nordmann"}
    with pytest.raises(NotFoundError):
        asyncio.run(service.get_speech("s2"))


def test_export_bypasses_the_cache():
    index = FakeIndex()
    service = make_service(index, export_page_size=10)

    async def collect():
        return [chunk async for chunk in service.export_tsv(SearchOptions(query="a"))]

    first = asyncio.run(collect())
    second = asyncio.run(collect())

    assert first == second
    assert len(first) == 2
    assert len(index.searches) == 2
    assert len(service.cache) == 0
