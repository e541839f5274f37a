"""Tests for sort and projection clauses."""

import pytest

from docapi.query import Projection, Sort, projection_to_json, sort_to_json


def test_sort_clauses_render_in_order() -> None:
    rendered = sort_to_json(Sort.descending("score"), Sort.ascending(["meta.x", "k"]))

    assert rendered == {"score": -1, "meta&.x.k": 1}
    assert list(rendered) == ["score", "meta&.x.k"]


def test_vector_and_vectorize_sorts() -> None:
    assert sort_to_json(Sort.by_vector([1, 0.5])) == {"$vector": [1.0, 0.5]}
    assert sort_to_json(Sort.vectorize("a cat")) == {"$vectorize": "a cat"}


def test_sort_requires_exactly_one_kind() -> None:
    with pytest.raises(ValueError, match="exactly one"):
        Sort(field="a")
    with pytest.raises(ValueError, match="exactly one"):
        Sort(field="a", order=1, passage="x")


def test_projection_include_exclude_and_slice() -> None:
    rendered = projection_to_json(
        Projection.include("name", "meta.k"),
        Projection.exclude("_id"),
        Projection.slice("tags", 1, 2),
        Projection.slice("history", -3),
    )

    assert rendered == {
        "name": 1,
        "meta.k": 1,
        "_id": 0,
        "tags": {"$slice": [1, 2]},
        "history": {"$slice": -3},
    }


def test_renderers_accept_raw_mappings_and_reject_other_values() -> None:
    assert sort_to_json({"a": 1}, Sort.descending("b")) == {"a": 1, "b": -1}
    assert projection_to_json({"a": 1}) == {"a": 1}
    with pytest.raises(TypeError, match="expected Sort"):
        sort_to_json("a")  # type: ignore[arg-type]
    with pytest.raises(TypeError, match="expected Projection"):
        projection_to_json(1)  # type: ignore[arg-type]
