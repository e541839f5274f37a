import pytest
from pydantic import ValidationError

from docapi.paging import FindSpec, Page


def test_page_helpers() -> None:
    page = Page.of([1, 2], next_page_state="t", sort_vector=[1, 2])

    assert page.items == (1, 2)
    assert page.has_next_page
    assert page.sort_vector == (1, 2)
    assert page.first() == 1
    assert not page.is_empty()
    assert Page.of([]).is_empty()
    assert Page.of([]).first() is None
    assert Page.of(["only"]).one() == "only"
    with pytest.raises(ValueError, match="expected exactly one"):
        page.one()


def test_find_spec_is_immutable_and_copies_on_change() -> None:
    spec = FindSpec(filter={"a": 1})
    changed = spec.with_changes(limit=3)

    assert spec.limit is None
    assert changed.limit == 3
    assert changed.filter == {"a": 1}
    with pytest.raises(ValidationError):
        spec.limit = 4  # type: ignore[misc]
    with pytest.raises(ValidationError):
        FindSpec(unknown=1)  # type: ignore[call-arg]


def test_find_spec_command_options_are_camel_cased() -> None:
    spec = FindSpec(skip=1, limit=2, include_similarity=True, include_sort_vector=True)

    assert spec.command_options("tok") == {
        "skip": 1,
        "limit": 2,
        "pageState": "tok",
        "includeSimilarity": True,
        "includeSortVector": True,
    }
    assert FindSpec().command_options() == {}
