import pytest

from speechsearch.core import InvalidIntervalError, SearchOptions
from speechsearch.search.query import ALLOWED_INTERVALS, QueryBuilder, interval_from


def test_interval_defaults_to_month():
    assert interval_from(SearchOptions(query="skatt")) == "month"


@pytest.mark.parametrize("interval", ALLOWED_INTERVALS)
def test_allowed_intervals_pass(interval):
    assert interval_from(SearchOptions(query="skatt", interval=interval)) == interval


@pytest.mark.parametrize("interval", ["week", "day", "1h"])
def test_fine_grained_intervals_are_rejected(interval):
    with pytest.raises(InvalidIntervalError):
        interval_from(SearchOptions(query="skatt", interval=interval))


def test_hits_query_excludes_presiding_officer_by_default():
    body = QueryBuilder().build_hits_query(SearchOptions(query="olje fond"))

    assert body["query"]["bool"]["must"] == [
        {"query_string": {"query": "olje fond", "default_operator": "AND", "default_field": "text"}}
    ]
    assert body["query"]["bool"]["must_not"] == [{"term": {"name": "Presidenten"}}]
    assert body["highlight"] == {
        "pre_tags": ["<mark>"],
        "post_tags": ["</mark>"],
        "fields": {"text": {}},
    }
    assert body["size"] == 10
    assert body["from"] == 0
    assert body["sort"] == "_score"


def test_hits_query_honours_paging_sort_and_president_flag():
    options = SearchOptions(query="olje", include_president=True, size=25, start=50, sort="time")

    body = QueryBuilder().build_hits_query(options)

    assert "must_not" not in body["query"]["bool"]
    assert body["size"] == 25
    assert body["from"] == 50
    assert body["sort"] == "time"


def test_aggregations_query_mirrors_baseline_facets():
    queries = QueryBuilder(time_zone="+01:00", terms_size=50)

    body = queries.build_aggregations_query(SearchOptions(query="olje", interval="12w"))
    aggs = body["aggs"]

    assert body["size"] == 0
    assert aggs["timeline"]["date_histogram"]["fixed_interval"] == "84d"
    assert aggs["timeline"]["date_histogram"]["time_zone"] == "+01:00"
    assert aggs["parties"] == {"terms": {"field": "party", "size": 50}}
    assert aggs["people"] == {"terms": {"field": "name", "size": 50}}

    query = queries.query_for("olje")
    assert aggs["filteredTimeline"] == {"filter": query, "aggs": {"timeline": aggs["timeline"]}}
    assert aggs["filteredParties"] == {"filter": query, "aggs": {"parties": aggs["parties"]}}

    filtered_people = aggs["filteredPeople"]["aggs"]["people"]
    assert filtered_people["terms"] == {"field": "name", "size": 50}
    assert filtered_people["aggs"]["person"]["top_hits"] == {
        "size": 1,
        "_source": {"includes": ["external_id", "party"]},
    }
    assert "aggs" not in aggs["people"]


def test_aggregations_query_uses_calendar_interval_for_months():
    body = QueryBuilder().build_aggregations_query(SearchOptions(query="olje"))

    assert body["aggs"]["timeline"]["date_histogram"]["calendar_interval"] == "month"


def test_aggregations_query_validates_interval():
    with pytest.raises(InvalidIntervalError):
        QueryBuilder().build_aggregations_query(SearchOptions(query="olje", interval="week"))


def test_context_query_selects_inclusive_order_range():
    body = QueryBuilder().build_context_query("T1", 3, 5)

    assert body["query"]["bool"]["filter"] == [
        {"term": {"transcript": "T1"}},
        {"range": {"order": {"gte": 3, "lte": 5}}},
    ]
    assert body["size"] == 3
    assert body["sort"] == [{"order": "asc"}]
