from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Literal

from ..document.document import VECTOR_FIELD, VECTORIZE_FIELD
from ..document.escape import escape_field_names

SortOrder = Literal[1, -1]


def _field_path(field: str | Iterable[str]) -> str:
    if isinstance(field, str):
        return field
    return escape_field_names(list(field))


@dataclass(frozen=True)
class Sort:
    """One sort clause: a field order, a query vector, or a text passage."""

    field: str
    order: SortOrder | None = None
    vector: tuple[float, ...] | None = None
    passage: str | None = None

    def __post_init__(self) -> None:
        given = [
            self.order is not None,
            self.vector is not None,
            self.passage is not None,
        ]
        if sum(given) != 1:
            raise ValueError("sort needs exactly one of order, vector or passage")

    @classmethod
    def ascending(cls, field: str | Iterable[str]) -> Sort:
        return cls(field=_field_path(field), order=1)

    @classmethod
    def descending(cls, field: str | Iterable[str]) -> Sort:
        return cls(field=_field_path(field), order=-1)

    @classmethod
    def by_vector(cls, embeddings: Sequence[float], field: str = VECTOR_FIELD) -> Sort:
        return cls(field=field, vector=tuple(float(x) for x in embeddings))

    @classmethod
    def vectorize(cls, passage: str, field: str = VECTORIZE_FIELD) -> Sort:
        return cls(field=field, passage=passage)

    @property
    def value(self) -> Any:
        if self.order is not None:
            return self.order
        if self.vector is not None:
            return list(self.vector)
        return self.passage


@dataclass(frozen=True)
class Projection:
    """Include, exclude or slice one field in returned documents."""

    field: str
    present: bool | None = None
    slice_start: int | None = None
    slice_end: int | None = None

    def __post_init__(self) -> None:
        if self.present is None and self.slice_start is None:
            raise ValueError("projection needs present= or a slice")

    @classmethod
    def include(cls, *fields: str) -> tuple[Projection, ...]:
        return tuple(cls(field=field, present=True) for field in fields)

    @classmethod
    def exclude(cls, *fields: str) -> tuple[Projection, ...]:
        return tuple(cls(field=field, present=False) for field in fields)

    @classmethod
    def slice(cls, field: str, start: int, end: int | None = None) -> Projection:
        return cls(field=field, slice_start=start, slice_end=end)

    @property
    def value(self) -> Any:
        if self.slice_start is not None:
            if self.slice_end is None:
                return {"$slice": self.slice_start}
            return {"$slice": [self.slice_start, self.slice_end]}
        return 1 if self.present else 0


def _flatten(items: Iterable[Any]) -> list[Any]:
    flat: list[Any] = []
    for item in items:
        if isinstance(item, tuple | list):
            flat.extend(item)
        else:
            flat.append(item)
    return flat


def sort_to_json(*sorts: Sort | Mapping[str, Any]) -> dict[str, Any]:
    """Render sort clauses, in order, as a Data API ``sort`` object."""
    rendered: dict[str, Any] = {}
    for item in _flatten(sorts):
        if isinstance(item, Mapping):
            rendered.update(item)
        elif isinstance(item, Sort):
            rendered[item.field] = item.value
        else:
            raise TypeError(f"expected Sort or mapping, got {type(item).__name__}")
    return rendered


def projection_to_json(
    *projections: Projection | Iterable[Projection] | Mapping[str, Any],
) -> dict[str, Any]:
    """Render projections as a Data API ``projection`` object."""
    rendered: dict[str, Any] = {}
    for item in _flatten(projections):
        if isinstance(item, Mapping):
            rendered.update(item)
        elif isinstance(item, Projection):
            rendered[item.field] = item.value
        else:
            raise TypeError(f"expected Projection or mapping, got {type(item).__name__}")
    return rendered


__all__ = [
    "Projection",
    "Sort",
    "SortOrder",
    "projection_to_json",
    "sort_to_json",
]
