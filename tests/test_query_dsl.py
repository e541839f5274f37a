"""Tests for the field-reference filter DSL."""

import pytest

from docapi.query import (
    F,
    AndFilter,
    EqFilter,
    ExistsFilter,
    NotFilter,
    OrFilter,
    and_,
    by_id,
    eq,
    gt,
    in_,
    not_,
    or_,
    size,
)


def test_attribute_access_builds_escaped_paths() -> None:
    assert (F.meta.k == 1) == EqFilter(path="meta.k", value=1)
    assert (F["a.b"].c == 1).path == "a&.b.c"
    assert (F.items[0] == "x").path == "items.0"
    assert (F["tom&jerry"] == 1).path == "tom&&jerry"
    assert (F.id == 7).path == "_id"


def test_comparisons_render_data_api_json() -> None:
    assert (F.score >= 0.5).to_json_dict() == {"score": {"$gte": 0.5}}
    assert (F.score < 2).to_json_dict() == {"score": {"$lt": 2}}
    assert (F.tag != "x").to_json_dict() == {"tag": {"$ne": "x"}}
    assert F.tags.all_("a", "b").to_json_dict() == {"tags": {"$all": ["a", "b"]}}
    assert F.tags.size(2).to_json_dict() == {"tags": {"$size": 2}}


def test_exists_and_missing() -> None:
    assert F.meta.exists() == ExistsFilter(path="meta")
    assert F.meta.missing() == NotFilter(arg=ExistsFilter(path="meta"))


def test_operators_compose() -> None:
    query = (F.a == 1) & ((F.b == 2) | ~(F.c == 3))

    assert isinstance(query, AndFilter)
    assert isinstance(query.args[1], OrFilter)
    assert query.to_json_dict() == {
        "$and": [
            {"a": {"$eq": 1}},
            {"$or": [{"b": {"$eq": 2}}, {"$not": {"c": {"$eq": 3}}}]},
        ]
    }


def test_invalid_field_keys_are_rejected() -> None:
    with pytest.raises(ValueError, match="negative indexes"):
        F.items[-1]
    with pytest.raises(ValueError, match="cannot be empty"):
        F[""]
    with pytest.raises(AttributeError):
        F._private


def test_function_builders_accept_paths_or_segments() -> None:
    assert eq("meta.k", 1) == EqFilter(path="meta.k", value=1)
    assert eq(["a.b", "c"], 1).path == "a&.b.c"
    assert gt("n", 3).to_json_dict() == {"n": {"$gt": 3}}
    assert in_("tag", "a", "b").to_json_dict() == {"tag": {"$in": ["a", "b"]}}
    assert size("tags", 0).to_json_dict() == {"tags": {"$size": 0}}
    assert by_id("doc-1").to_json_dict() == {"_id": {"$eq": "doc-1"}}


def test_logical_builders() -> None:
    a = eq("a", 1)
    b = eq("b", 2)

    assert and_(a, b).to_json_dict() == {"$and": [{"a": {"$eq": 1}}, {"b": {"$eq": 2}}]}
    assert or_(a, b).to_json_dict() == {"$or": [{"a": {"$eq": 1}}, {"b": {"$eq": 2}}]}
    assert not_(a).to_json_dict() == {"$not": {"a": {"$eq": 1}}}
    with pytest.raises(ValueError):
        and_()
