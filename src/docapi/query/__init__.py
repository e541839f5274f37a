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
    TrueFilter,
    as_filter_dict,
    parse_filter,
)
from .dsl import (
    F,
    FieldRef,
    all_,
    and_,
    by_id,
    eq,
    exists,
    gt,
    gte,
    in_,
    lt,
    lte,
    ne,
    nin,
    not_,
    or_,
    size,
)
from .eval import matches
from .sort import Projection, Sort, projection_to_json, sort_to_json

__all__ = [
    "F",
    "Filter",
    "FieldRef",
    "Projection",
    "Sort",
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
    "all_",
    "and_",
    "as_filter_dict",
    "by_id",
    "eq",
    "exists",
    "gt",
    "gte",
    "in_",
    "lt",
    "lte",
    "matches",
    "ne",
    "nin",
    "not_",
    "or_",
    "parse_filter",
    "projection_to_json",
    "size",
    "sort_to_json",
]
