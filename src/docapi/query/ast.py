"""AST models for Data API document filters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Annotated, Any, Literal, TypeAlias, cast

from pydantic import BaseModel, ConfigDict, Field

from ..document.codec import ENVELOPE_KEYS, decode_value, encode_value


class _FilterNode(BaseModel, ABC):
    model_config = ConfigDict(extra="forbid", frozen=True)

    def __and__(self, other: object) -> Filter:
        if not isinstance(other, _FilterNode):
            return NotImplemented
        return _merge_and(self, other)

    def __or__(self, other: object) -> Filter:
        if not isinstance(other, _FilterNode):
            return NotImplemented
        return _merge_or(self, other)

    def __invert__(self) -> Filter:
        return NotFilter(arg=cast("Filter", self), op="not")

    def __bool__(self) -> bool:
        raise TypeError(
            "filter expressions are not truthy; combine them with '&', '|' and '~'"
        )

    @abstractmethod
    def to_json_dict(self) -> dict[str, Any]: ...


class _FieldOperator(_FilterNode):
    path: str

    @abstractmethod
    def _operand(self) -> Any: ...

    def to_json_dict(self) -> dict[str, Any]:
        return {self.path: {f"${self.op}": self._operand()}}  # type: ignore[attr-defined]


class _ValueOperator(_FieldOperator):
    value: Any

    def _operand(self) -> Any:
        return encode_value(self.value)


class _ValuesOperator(_FieldOperator):
    values: list[Any]

    def _operand(self) -> Any:
        return [encode_value(value) for value in self.values]


class TrueFilter(_FilterNode):
    op: Literal["true"] = "true"

    def to_json_dict(self) -> dict[str, Any]:
        return {}


class AndFilter(_FilterNode):
    op: Literal["and"] = "and"
    args: list[Filter] = Field(min_length=1)

    def to_json_dict(self) -> dict[str, Any]:
        return {"$and": [arg.to_json_dict() for arg in self.args]}


class OrFilter(_FilterNode):
    op: Literal["or"] = "or"
    args: list[Filter] = Field(min_length=1)

    def to_json_dict(self) -> dict[str, Any]:
        return {"$or": [arg.to_json_dict() for arg in self.args]}


class NotFilter(_FilterNode):
    op: Literal["not"] = "not"
    arg: Filter

    def to_json_dict(self) -> dict[str, Any]:
        return {"$not": self.arg.to_json_dict()}


class ExistsFilter(_FieldOperator):
    op: Literal["exists"] = "exists"

    def _operand(self) -> Any:
        return True


class EqFilter(_ValueOperator):
    op: Literal["eq"] = "eq"


class NeFilter(_ValueOperator):
    op: Literal["ne"] = "ne"


class LtFilter(_ValueOperator):
    op: Literal["lt"] = "lt"


class LteFilter(_ValueOperator):
    op: Literal["lte"] = "lte"


class GtFilter(_ValueOperator):
    op: Literal["gt"] = "gt"


class GteFilter(_ValueOperator):
    op: Literal["gte"] = "gte"


class InFilter(_ValuesOperator):
    op: Literal["in"] = "in"


class NinFilter(_ValuesOperator):
    op: Literal["nin"] = "nin"


class AllFilter(_ValuesOperator):
    op: Literal["all"] = "all"


class SizeFilter(_FieldOperator):
    op: Literal["size"] = "size"
    size: int = Field(ge=0)

    def _operand(self) -> Any:
        return self.size


Filter: TypeAlias = Annotated[
    TrueFilter
    | AndFilter
    | OrFilter
    | NotFilter
    | ExistsFilter
    | EqFilter
    | NeFilter
    | LtFilter
    | LteFilter
    | GtFilter
    | GteFilter
    | InFilter
    | NinFilter
    | AllFilter
    | SizeFilter,
    Field(discriminator="op"),
]

_VALUE_OPERATORS: dict[str, type[_ValueOperator]] = {
    "$eq": EqFilter,
    "$ne": NeFilter,
    "$lt": LtFilter,
    "$lte": LteFilter,
    "$gt": GtFilter,
    "$gte": GteFilter,
}
_VALUES_OPERATORS: dict[str, type[_ValuesOperator]] = {
    "$in": InFilter,
    "$nin": NinFilter,
    "$all": AllFilter,
}


def _as_filter(node: _FilterNode) -> Filter:
    return cast("Filter", node)


def _merge_and(left: _FilterNode, right: _FilterNode) -> Filter:
    if isinstance(left, AndFilter):
        args: list[Filter] = list(left.args)
    else:
        args = [_as_filter(left)]

    if isinstance(right, AndFilter):
        args.extend(right.args)
    else:
        args.append(_as_filter(right))

    return AndFilter(op="and", args=args)


def _merge_or(left: _FilterNode, right: _FilterNode) -> Filter:
    if isinstance(left, OrFilter):
        args: list[Filter] = list(left.args)
    else:
        args = [_as_filter(left)]

    if isinstance(right, OrFilter):
        args.extend(right.args)
    else:
        args.append(_as_filter(right))

    return OrFilter(op="or", args=args)


def _is_operator_map(value: Any) -> bool:
    if not isinstance(value, Mapping) or not value:
        return False
    if len(value) == 1 and next(iter(value)) in ENVELOPE_KEYS:
        return False
    return all(isinstance(key, str) and key.startswith("$") for key in value)


def _parse_field(path: str, condition: Any) -> list[Filter]:
    if not _is_operator_map(condition):
        return [EqFilter(path=path, value=decode_value(condition))]

    nodes: list[Filter] = []
    for operator, operand in condition.items():
        if operator in _VALUE_OPERATORS:
            nodes.append(_VALUE_OPERATORS[operator](path=path, value=decode_value(operand)))
        elif operator in _VALUES_OPERATORS:
            if not isinstance(operand, list):
                raise ValueError(f"{operator} on {path!r} expects a list, got {operand!r}")
            nodes.append(
                _VALUES_OPERATORS[operator](
                    path=path, values=[decode_value(item) for item in operand]
                )
            )
        elif operator == "$exists":
            node: Filter = ExistsFilter(path=path)
            nodes.append(node if operand else NotFilter(arg=node))
        elif operator == "$size":
            nodes.append(SizeFilter(path=path, size=operand))
        else:
            raise ValueError(f"unsupported filter operator {operator!r} on {path!r}")
    return nodes


def parse_filter(payload: Mapping[str, Any] | None) -> Filter:
    """Parse Data API filter JSON into AST nodes.

    Sibling conditions are combined with ``and``; an empty filter matches
    every document.
    """
    if not payload:
        return TrueFilter()

    nodes: list[Filter] = []
    for key, condition in payload.items():
        if key in ("$and", "$or"):
            if not isinstance(condition, list) or not condition:
                raise ValueError(f"{key} expects a non-empty list of filters")
            children = [parse_filter(child) for child in condition]
            nodes.append(AndFilter(args=children) if key == "$and" else OrFilter(args=children))
        elif key == "$not":
            nodes.append(NotFilter(arg=parse_filter(condition)))
        else:
            nodes.extend(_parse_field(key, condition))

    if len(nodes) == 1:
        return nodes[0]
    return AndFilter(args=nodes)


def as_filter_dict(value: _FilterNode | Mapping[str, Any] | None) -> dict[str, Any] | None:
    """Render a filter node or pass a JSON filter mapping through."""
    if value is None:
        return None
    if isinstance(value, _FilterNode):
        return value.to_json_dict()
    if isinstance(value, Mapping):
        return dict(value)
    raise TypeError(f"expected a filter node or mapping, got {type(value).__name__}")


__all__ = [
    "Filter",
    "AllFilter",
    "AndFilter",
    "EqFilter",
    "ExistsFilter",
    "GtFilter",
    "GteFilter",
    "InFilter",
    "LtFilter",
    "LteFilter",
    "NeFilter",
    "NinFilter",
    "NotFilter",
    "OrFilter",
    "SizeFilter",
    "TrueFilter",
    "as_filter_dict",
    "parse_filter",
]
