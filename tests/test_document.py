"""Tests for the literal and escaped addressing verbs on Document."""

import datetime
import uuid

import pytest
from pydantic import ValidationError

from docapi import Document, InvalidFieldPathError, ObjectId


def test_put_stores_dotted_key_literally() -> None:
    doc = Document()
    doc.put("a.b", "literal")

    assert doc.get("a.b") == "literal"
    assert doc.get("a") is None
    assert doc.to_dict() == {"a.b": "literal"}


def test_put_keeps_special_characters_literal() -> None:
    doc = Document().put("key&value", 42).put("arr[0]", "zero")

    assert doc.get("key&value") == 42
    assert doc.get("arr[0]") == "zero"


def test_append_navigates_and_creates_maps() -> None:
    doc = Document().append("a.b", "value")

    assert doc.read("a.b") == "value"
    assert doc.get(["a"]) == {"b": "value"}
    assert doc.get("a.b") is None


def test_append_merges_into_existing_map() -> None:
    doc = Document().append("meta.key1", "v1").append("meta.key2", "v2")

    assert doc.to_dict() == {"meta": {"key1": "v1", "key2": "v2"}}


def test_append_replaces_scalar_intermediate_with_map() -> None:
    doc = Document(a=1).append("a.b", 2)

    assert doc.to_dict() == {"a": {"b": 2}}


def test_append_with_escaped_dot_writes_one_key() -> None:
    doc = Document().append("a&.b", "value")

    assert doc.get("a.b") == "value"
    assert doc.get("a") is None


def test_escaped_path_round_trips_through_append_and_read() -> None:
    doc = Document().append("ns.field&.v2", "x")

    assert doc.read("ns.field&.v2") == "x"
    assert doc.get(["ns", "field.v2"]) == "x"


def test_append_with_escaped_ampersand() -> None:
    doc = Document().append("parent.child&&name", "val")

    assert doc.get(["parent", "child&name"]) == "val"
    assert doc.read("parent.child&&name") == "val"


def test_append_with_raw_segments_does_not_unescape() -> None:
    doc = Document().append(["a.b", "c&d"], "val")

    assert doc.get(["a.b", "c&d"]) == "val"
    assert doc.read("a&.b.c&&d") == "val"


def test_append_keeps_bracket_segments_literal() -> None:
    doc = Document().append("arr[0]", "zero")

    assert doc.get("arr[0]") == "zero"


def test_append_rejects_malformed_path() -> None:
    doc = Document()

    with pytest.raises(InvalidFieldPathError, match="invalid escape"):
        doc.append("a.b&c", "bad")
    assert doc.to_dict() == {}


def test_append_if_not_none_skips_none() -> None:
    doc = Document().append_if_not_none("a.b", None).append_if_not_none("a.c", 1)

    assert doc.to_dict() == {"a": {"c": 1}}


@pytest.mark.parametrize("path", ["", "a."])
def test_escaped_verbs_reject_bad_paths(path: str) -> None:
    doc = Document(a=1)

    with pytest.raises(InvalidFieldPathError):
        doc.read(path)
    with pytest.raises(InvalidFieldPathError):
        doc.contains_key(path)
    with pytest.raises(InvalidFieldPathError):
        doc.remove(path)


def test_get_with_segments_navigates_without_escaping() -> None:
    doc = Document().append("root.child", "hello")

    assert doc.get(["root", "child"]) == "hello"
    assert doc.get(["root", "missing"]) is None
    assert doc.get(["root", "missing"], "fallback") == "fallback"


def test_get_rejects_empty_segment_list() -> None:
    with pytest.raises(InvalidFieldPathError):
        Document().get([])


def test_read_distinguishes_missing_from_none() -> None:
    doc = Document(present=None)

    assert doc.read("present") is None
    assert doc.contains_key("present")
    assert not doc.contains_key("absent")
    assert doc.read("absent", default="dflt") == "dflt"


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("items.1", "b"),
        ("items[1]", "b"),
        ("items.0", "a"),
        ("items[2]", "c"),
    ],
)
def test_read_indexes_lists(path: str, expected: str) -> None:
    doc = Document(items=["a", "b", "c"])

    assert doc.read(path) == expected


@pytest.mark.parametrize("path", ["items.5", "items[5]", "items.-1", "items[-1]"])
def test_read_out_of_range_index_is_absent(path: str) -> None:
    doc = Document(items=["a", "b", "c"])

    assert doc.read(path) is None
    assert not doc.contains_key(path)


def test_read_mixes_maps_and_lists() -> None:
    doc = Document(items=[{"name": "Alice"}, {"name": "Bob"}])
    doc.append("data.list", [10, 20, 30])

    assert doc.read("items[0].name") == "Alice"
    assert doc.read("items.1.name") == "Bob"
    assert doc.read("data.list[1]") == 20


def test_numeric_segment_on_map_reads_literal_key() -> None:
    doc = Document().append("by_rank.0", "first")

    assert doc.read("by_rank.0") == "first"


def test_remove_does_not_prune_ancestors() -> None:
    doc = Document().append("a.b.c", "v1")

    doc.remove("a.b.c")

    assert not doc.contains_key("a.b.c")
    assert doc.contains_key("a.b")
    assert doc.get(["a", "b"]) == {}


def test_remove_leaves_siblings_and_ignores_missing_paths() -> None:
    doc = Document().append("a.b", "v1").append("a.c", "v2")

    doc.remove("a.b").remove("a.zzz").remove("nope.deeper")

    assert doc.to_dict() == {"a": {"c": "v2"}}


def test_remove_whole_subtree_with_escaped_path() -> None:
    doc = Document().append("parent.child&.name.x", 1).append("parent.keep", 2)

    doc.remove("parent.child&.name")

    assert doc.to_dict() == {"parent": {"keep": 2}}


def test_typed_readers_convert_and_widen() -> None:
    doc = Document()
    doc.append("user.name", "Alice")
    doc.append("stats.count", 42)
    doc.append("stats.big", 100_000_000_000)
    doc.append("ratio.value", 3)
    doc.append("flags.active", True)
    doc.append("config.tags", ["a", "b", "c"])
    doc.append("config.limits", {"cpu": 2})

    assert doc.read_string("user.name") == "Alice"
    assert doc.read_integer("stats.count") == 42
    assert doc.read_long("stats.big") == 100_000_000_000
    assert doc.read_long("stats.count") == 42
    ratio = doc.read_double("ratio.value")
    assert ratio == 3.0 and isinstance(ratio, float)
    assert doc.read_boolean("flags.active") is True
    assert doc.read_list("config.tags", str) == ["a", "b", "c"]
    assert doc.read_map("config.limits", int) == {"cpu": 2}
    assert doc.read("stats.count", float) == 42.0


def test_typed_readers_return_none_for_missing() -> None:
    doc = Document()

    assert doc.read_string("missing.path") is None
    assert doc.read_integer("missing") is None
    assert doc.read_list("missing.list", str) is None


def test_typed_reader_rejects_unconvertible_value() -> None:
    doc = Document().append("user.name", "Alice")

    with pytest.raises(ValidationError):
        doc.read_integer("user.name")


def test_equality_is_order_sensitive_between_documents() -> None:
    first = Document().put("a", 1).put("b", 2)
    second = Document().put("b", 2).put("a", 1)

    assert first != second
    assert first == Document(a=1, b=2)
    assert first == {"a": 1, "b": 2}
    assert first != {"b": 2, "a": 1}


def test_equality_is_order_sensitive_in_nested_maps() -> None:
    first = Document().append("a.x", 1).append("a.y", 2)
    second = Document().append("a.y", 2).append("a.x", 1)

    assert first != second
    assert first == Document().append("a.x", 1).append("a.y", 2)
    assert first == {"a": {"x": 1, "y": 2}}
    assert first != {"a": {"y": 2, "x": 1}}


def test_equality_is_order_sensitive_for_maps_inside_lists() -> None:
    first = Document(items=[{"k": 1, "v": 2}])

    assert first == {"items": [{"k": 1, "v": 2}]}
    assert first != {"items": [{"v": 2, "k": 1}]}


def test_reserved_field_helpers() -> None:
    doc = Document()
    doc.id = "doc-1"
    doc.vector = [1, 0.5]
    doc.vectorize = "some text"

    assert doc.id == "doc-1"
    assert doc.vector == [1.0, 0.5]
    assert doc.vectorize == "some text"
    assert doc.similarity is None
    assert Document({"$similarity": 0.75}).similarity == 0.75


def test_json_round_trip_keeps_extended_scalars() -> None:
    when = datetime.datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=datetime.timezone.utc)
    key = uuid.UUID("12345678-1234-5678-1234-567812345678")
    doc = Document(
        _id=ObjectId("65a1b2c3d4e5f60718293a4b"),
        created=when,
        key=key,
        blob=b"\x00\x01",
    )
    doc.append("meta.k", 1)

    text = doc.to_json()
    restored = Document.parse(text)

    assert '"$date": 1704164645678' in text
    assert restored == doc
    assert restored.read("meta.k") == 1


def test_parse_rejects_non_object_json() -> None:
    with pytest.raises(TypeError, match="JSON object"):
        Document.parse("[1, 2]")


def test_copy_is_deep() -> None:
    doc = Document().append("a.b", [1])
    clone = doc.copy()

    clone.get(["a", "b"]).append(2)

    assert doc.read("a.b") == [1]
