from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from ..document.escape import escape_field_names, escape_segment
from .ast import (
    AllFilter,
    AndFilter,
    EqFilter,
    ExistsFilter,
    Filter,
    GteFilter,
    GtFilter,
    InFilter,
    LteFilter,
    LtFilter,
    NeFilter,
    NinFilter,
    NotFilter,
    OrFilter,
    SizeFilter,
)


def _join(parent: str, segment: str) -> str:
    return f"{parent}.{segment}" if parent else segment


def _field_path(field: str | Iterable[str]) -> str:
    if isinstance(field, str):
        return field
    return escape_field_names(list(field))


@dataclass(frozen=True)
class FieldRef:
    """Reference to a document field; comparisons build filter nodes.

    Attribute access and string keys add one literal segment (dots inside a
    key are escaped), integer keys add a list index.
    """

    path: str

    def __getattr__(self, segment: str) -> FieldRef:
        if segment.startswith("_"):
            raise AttributeError(segment)
        return FieldRef(path=_join(self.path, escape_segment(segment)))

    def __getitem__(self, key: int | str) -> FieldRef:
        if isinstance(key, int):
            if key < 0:
                raise ValueError("negative indexes are not supported in field paths")
            return FieldRef(path=_join(self.path, str(key)))
        if not key:
            raise ValueError("string keys in field paths cannot be empty")
        return FieldRef(path=_join(self.path, escape_segment(key)))

    def __eq__(self, value: Any) -> Filter:  # type: ignore[override]
        return EqFilter(path=self.path, value=value)

    def __ne__(self, value: Any) -> Filter:  # type: ignore[override]
        return NeFilter(path=self.path, value=value)

    def __lt__(self, value: Any) -> Filter:
        return LtFilter(path=self.path, value=value)

    def __le__(self, value: Any) -> Filter:
        return LteFilter(path=self.path, value=value)

    def __gt__(self, value: Any) -> Filter:
        return GtFilter(path=self.path, value=value)

    def __ge__(self, value: Any) -> Filter:
        return GteFilter(path=self.path, value=value)

    def exists(self) -> Filter:
        return ExistsFilter(path=self.path)

    def missing(self) -> Filter:
        return NotFilter(arg=ExistsFilter(path=self.path))

    def in_(self, *values: Any) -> Filter:
        return InFilter(path=self.path, values=[*values])

    def not_in(self, *values: Any) -> Filter:
        return NinFilter(path=self.path, values=[*values])

    def all_(self, *values: Any) -> Filter:
        return AllFilter(path=self.path, values=[*values])

    def size(self, size: int) -> Filter:
        return SizeFilter(path=self.path, size=size)


@dataclass(frozen=True)
class _FieldRoot:
    def __getattr__(self, segment: str) -> FieldRef:
        if segment.startswith("_"):
            raise AttributeError(segment)
        return FieldRef(path=escape_segment(segment))

    def __getitem__(self, key: str) -> FieldRef:
        if not key:
            raise ValueError("string keys in field paths cannot be empty")
        return FieldRef(path=escape_segment(key))

    @property
    def id(self) -> FieldRef:
        return FieldRef(path="_id")


F = _FieldRoot()


def eq(field: str | Iterable[str], value: Any) -> Filter:
    """Field equals ``value``. ``field`` is an escaped path or raw segments."""
    return EqFilter(path=_field_path(field), value=value)


def ne(field: str | Iterable[str], value: Any) -> Filter:
    return NeFilter(path=_field_path(field), value=value)


def lt(field: str | Iterable[str], value: Any) -> Filter:
    return LtFilter(path=_field_path(field), value=value)


def lte(field: str | Iterable[str], value: Any) -> Filter:
    return LteFilter(path=_field_path(field), value=value)


def gt(field: str | Iterable[str], value: Any) -> Filter:
    return GtFilter(path=_field_path(field), value=value)


def gte(field: str | Iterable[str], value: Any) -> Filter:
    return GteFilter(path=_field_path(field), value=value)


def in_(field: str | Iterable[str], *values: Any) -> Filter:
    return InFilter(path=_field_path(field), values=[*values])


def nin(field: str | Iterable[str], *values: Any) -> Filter:
    return NinFilter(path=_field_path(field), values=[*values])


def all_(field: str | Iterable[str], *values: Any) -> Filter:
    return AllFilter(path=_field_path(field), values=[*values])


def exists(field: str | Iterable[str]) -> Filter:
    return ExistsFilter(path=_field_path(field))


def size(field: str | Iterable[str], size: int) -> Filter:
    return SizeFilter(path=_field_path(field), size=size)


def and_(*filters: Filter) -> Filter:
    return AndFilter(args=[*filters])


def or_(*filters: Filter) -> Filter:
    return OrFilter(args=[*filters])


def not_(filter: Filter) -> Filter:
    return NotFilter(arg=filter)


def by_id(value: Any) -> Filter:
    return EqFilter(path="_id", value=value)


__all__ = [
    "F",
    "FieldRef",
    "all_",
    "and_",
    "by_id",
    "eq",
    "exists",
    "gt",
    "gte",
    "in_",
    "lt",
    "lte",
    "ne",
    "nin",
    "not_",
    "or_",
    "size",
]
