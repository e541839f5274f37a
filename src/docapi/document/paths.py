"""Path traversal helpers over nested map/list document trees."""

from __future__ import annotations

import re
from collections.abc import Mapping, MutableMapping, Sequence
from typing import Any, TypeAlias

JSONScalar: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = (
    JSONScalar | list["JSONValue"] | tuple["JSONValue", ...] | dict[str, "JSONValue"]
)

_INDEX_SUFFIX = re.compile(r"^(?P<name>.+?)(?P<indexes>(?:\[-?\d+\])+)$")
_INDEX_TOKEN = re.compile(r"\[(-?\d+)\]")


class _PathMissing:
    """Sentinel for missing document paths."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "PATH_MISSING"

    def __bool__(self) -> bool:
        return False


PATH_MISSING: _PathMissing = _PathMissing()


def split_index_suffix(segment: str) -> list[str]:
    """Expand ``name[i][j]`` into ``["name", "i", "j"]``.

    Segments without a bracketed suffix, or with nothing before the brackets,
    are returned unchanged.
    """
    match = _INDEX_SUFFIX.match(segment)
    if match is None:
        return [segment]
    return [match.group("name"), *_INDEX_TOKEN.findall(match.group("indexes"))]


def expand_index_segments(segments: Sequence[str]) -> list[str]:
    expanded: list[str] = []
    for segment in segments:
        expanded.extend(split_index_suffix(segment))
    return expanded


def _list_index(segment: str, length: int) -> int | None:
    if not (segment.isascii() and segment.isdigit()):
        return None
    index = int(segment)
    if index >= length:
        return None
    return index


def _step(current: Any, segment: str) -> Any:
    match current:
        case Mapping():
            if segment not in current:
                return PATH_MISSING
            return current[segment]
        case list() | tuple():
            index = _list_index(segment, len(current))
            if index is None:
                return PATH_MISSING
            return current[index]
        case _:
            return PATH_MISSING


def get_path(root: Any, segments: Sequence[str]) -> Any:
    """Walk raw ``segments`` from ``root``.

    Map nodes are looked up by literal key; list nodes accept only
    non-negative decimal indexes. Returns ``PATH_MISSING`` as soon as a
    segment cannot be resolved. An empty ``segments`` returns ``root``.
    """
    current = root
    for segment in segments:
        current = _step(current, segment)
        if current is PATH_MISSING:
            return PATH_MISSING
    return current


def has_path(root: Any, segments: Sequence[str]) -> bool:
    return get_path(root, segments) is not PATH_MISSING


def set_path(
    root: MutableMapping[str, Any], segments: Sequence[str], value: Any
) -> None:
    """Store ``value`` at ``segments``, creating intermediate maps.

    Any intermediate value that is not a map (missing, scalar or list) is
    replaced by a new empty ``dict``. List positions are never written by
    index.
    """
    if not segments:
        raise ValueError("cannot set a value at an empty path")

    current: MutableMapping[str, Any] = root
    for segment in segments[:-1]:
        nested = current.get(segment)
        if not isinstance(nested, MutableMapping):
            nested = {}
            current[segment] = nested
        current = nested
    current[segments[-1]] = value


def remove_path(root: Any, segments: Sequence[str]) -> bool:
    """Delete the key at ``segments`` if its parent is a map.

    Returns whether a key was removed. Emptied ancestors are left in place.
    """
    if not segments:
        return False

    parent = get_path(root, segments[:-1])
    if not isinstance(parent, MutableMapping):
        return False
    leaf = segments[-1]
    if leaf not in parent:
        return False
    del parent[leaf]
    return True


__all__ = [
    "PATH_MISSING",
    "JSONScalar",
    "JSONValue",
    "expand_index_segments",
    "get_path",
    "has_path",
    "remove_path",
    "set_path",
    "split_index_suffix",
]
