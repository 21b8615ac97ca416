"""Tests for search-request translation."""

import copy
import re

import pytest
from pydantic import ValidationError

from docrepo.exceptions import InvalidFilterError
from docrepo.query import Query, SearchRequest, translate


def test_page_and_page_size_derive_skip_and_take() -> None:
    query = translate(SearchRequest(page=2, page_size=10))

    assert query.skip == 20
    assert query.take == 10


def test_page_without_page_size_leaves_pagination_unset() -> None:
    query = translate(SearchRequest(page=3))

    assert query.skip is None
    assert query.take is None


def test_page_size_alone_sets_take_only() -> None:
    query = translate(SearchRequest(page_size=25))

    assert query.take == 25
    assert query.skip is None


def test_first_page_skips_nothing() -> None:
    assert translate(SearchRequest(page=0, page_size=10)).skip == 0


def test_sort_direction_is_lower_cased() -> None:
    assert translate(SearchRequest(sort="age:DESC")).order_by == {"age": "desc"}


@pytest.mark.parametrize("sort", [None, "", "age", "age:", ":desc", ":"])
def test_unparseable_sort_is_dropped(sort) -> None:
    assert translate(SearchRequest(sort=sort)).order_by is None


def test_sort_splits_on_first_colon_only() -> None:
    assert translate(SearchRequest(sort="meta.rank:asc:extra")).order_by == {
        "meta.rank": "asc:extra"
    }


def test_unknown_direction_is_passed_through() -> None:
    assert translate(SearchRequest(sort="age:Sideways")).order_by == {"age": "sideways"}


@pytest.mark.parametrize("filters", [None, {}, {"$and": []}, {"$or": [{"a": 1}]}])
def test_missing_or_empty_conjunction_omits_where(filters) -> None:
    assert translate(SearchRequest(filters=filters)).where is None


def test_not_value_becomes_pattern() -> None:
    query = translate(SearchRequest(filters={"$and": [{"name": {"$not": "foo"}}]}))

    condition = query.where["$and"][0]["name"]["$not"]
    assert isinstance(condition, re.Pattern)
    assert condition.pattern == "foo"
    assert condition.search("xfoox")


def test_not_value_uses_string_form() -> None:
    query = translate(SearchRequest(filters={"$and": [{"code": {"$not": 42}}]}))

    assert query.where["$and"][0]["code"]["$not"].pattern == "42"


def test_literals_and_comparison_operators_are_kept() -> None:
    filters = {"$and": [{"status": "open"}, {"age": {"$gte": 18, "$lt": 65}}]}

    query = translate(SearchRequest(filters=filters))

    assert query.where == filters


def test_nested_logical_arrays_are_walked() -> None:
    filters = {
        "$and": [
            {
                "$or": [
                    {"name": {"$not": "^tmp"}},
                    {"tags": {"$in": ["a", "b"]}},
                ]
            }
        ]
    }

    query = translate(SearchRequest(filters=filters))

    branches = query.where["$and"][0]["$or"]
    assert isinstance(branches, list)
    assert branches[0]["name"]["$not"].pattern == "^tmp"
    assert branches[1] == {"tags": {"$in": ["a", "b"]}}


def test_translation_does_not_mutate_input() -> None:
    filters = {"$and": [{"name": {"$not": "foo"}}, {"meta": {"owner": {"$not": "bot"}}}]}
    original = copy.deepcopy(filters)

    translate(SearchRequest(filters=filters))

    assert filters == original


def test_translation_is_deterministic() -> None:
    request = SearchRequest(
        page=1,
        page_size=5,
        sort="createTime:desc",
        filters={"$and": [{"name": {"$not": "foo"}}, {"age": {"$gt": 3}}]},
    )

    assert translate(request) == translate(request)


def test_invalid_pattern_raises() -> None:
    request = SearchRequest(filters={"$and": [{"name": {"$not": "foo("}}]})

    with pytest.raises(InvalidFilterError) as exc_info:
        translate(request)

    assert exc_info.value.pattern == "foo("
    assert isinstance(exc_info.value, ValueError)


def test_mapping_input_accepts_wire_names() -> None:
    query = translate({"page": 1, "pageSize": 20, "sort": "name:asc"})

    assert query == Query(skip=20, take=20, order_by={"name": "asc"})


def test_invalid_pagination_is_rejected() -> None:
    with pytest.raises(ValidationError):
        translate({"page": -1, "pageSize": 10})

    with pytest.raises(ValidationError):
        SearchRequest(page_size=0)


def test_query_kwargs_contain_only_set_clauses() -> None:
    query = translate(SearchRequest(page_size=10, sort="name:asc"))

    assert query.as_kwargs() == {"take": 10, "order_by": {"name": "asc"}}
