from __future__ import annotations

import functools
from collections.abc import Iterator, Mapping, MutableMapping, Sequence
from typing import Any, TypeVar, overload

from pydantic import TypeAdapter

from ..errors import InvalidFieldPathError
from . import codec
from .escape import unescape_field_path
from .paths import (
    PATH_MISSING,
    expand_index_segments,
    get_path,
    remove_path,
    set_path,
)

T = TypeVar("T")

ID_FIELD = "_id"
VECTOR_FIELD = "$vector"
VECTORIZE_FIELD = "$vectorize"
SIMILARITY_FIELD = "$similarity"


@functools.cache
def _adapter(target: Any) -> TypeAdapter[Any]:
    return TypeAdapter(target)


def _require_path(path: str) -> str:
    if not isinstance(path, str):
        raise TypeError(f"field path must be str, got {type(path)}")
    if not path:
        raise InvalidFieldPathError(path, "path must not be empty")
    return path


def _raw_segments(segments: Sequence[str]) -> list[str]:
    parts = list(segments)
    if not parts:
        raise InvalidFieldPathError("", "path must have at least one segment")
    for part in parts:
        if not isinstance(part, str):
            raise TypeError(f"field path segments must be str, got {type(part)}")
    return parts


def _plain(value: Any) -> Any:
    match value:
        case Mapping():
            return {key: _plain(item) for key, item in value.items()}
        case list() | tuple():
            return [_plain(item) for item in value]
        case _:
            return value


def _ordered(value: Any) -> Any:
    """Comparison form in which map key order is significant at every level."""
    match value:
        case Mapping():
            return [(key, _ordered(item)) for key, item in value.items()]
        case list() | tuple():
            return [_ordered(item) for item in value]
        case _:
            return value


class Document(MutableMapping[str, Any]):
    """An ordered tree of string keys to scalars, lists and nested maps.

    Two families of verbs address the tree and must not be mixed up:

    * ``put`` / ``get`` (and the mapping protocol) use literal keys. A key
      such as ``"a.b"`` is stored and looked up verbatim. ``get`` also accepts
      a list of raw segments, which are navigated without any unescaping.
    * ``append`` / ``read`` / ``contains_key`` / ``remove`` take escaped field
      paths (``"a.b"`` is two levels, ``"a&.b"`` is one key containing a
      dot) and navigate nested maps. Read-side verbs also accept list indexes
      as ``items.1`` or ``items[1]``.

    Missing paths read as ``None`` (or the supplied default); use
    ``contains_key`` to tell a missing path from a stored ``None``.
    """

    def __init__(self, data: Mapping[str, Any] | None = None, /, **fields: Any) -> None:
        self._data: dict[str, Any] = {}
        if data is not None:
            for key, value in data.items():
                self.put(key, value)
        for key, value in fields.items():
            self.put(key, value)

    # Literal mapping protocol.

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        if not isinstance(key, str):
            raise TypeError(f"document keys must be str, got {type(key)}")
        self._data[key] = value

    def __delitem__(self, key: str) -> None:
        del self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Mapping):
            return _ordered(self._data) == _ordered(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Document({self._data!r})"

    # Literal verbs.

    def put(self, key: str, value: Any) -> Document:
        """Store ``value`` under the literal ``key``; dots are not interpreted."""
        self[key] = value
        return self

    @overload
    def get(self, key: str, default: Any = None) -> Any: ...

    @overload
    def get(self, key: Sequence[str], default: Any = None) -> Any: ...

    def get(self, key: str | Sequence[str], default: Any = None) -> Any:
        """Look up a literal key, or navigate a list of raw segments."""
        if isinstance(key, str):
            return self._data.get(key, default)
        value = get_path(self._data, _raw_segments(key))
        return default if value is PATH_MISSING else value

    # Escaping-aware verbs.

    def append(self, path: str | Sequence[str], value: Any) -> Document:
        """Store ``value`` at a nested path, creating intermediate maps.

        A ``str`` path is unescaped; a list of segments is used verbatim.
        """
        if isinstance(path, str):
            segments = unescape_field_path(_require_path(path))
        else:
            segments = _raw_segments(path)
        set_path(self._data, segments, value)
        return self

    def append_if_not_none(self, path: str | Sequence[str], value: Any) -> Document:
        if value is not None:
            self.append(path, value)
        return self

    def _read_segments(self, path: str) -> list[str]:
        return expand_index_segments(unescape_field_path(_require_path(path)))

    @overload
    def read(self, path: str, type_: None = None, *, default: Any = None) -> Any: ...

    @overload
    def read(self, path: str, type_: type[T], *, default: Any = None) -> T | None: ...

    def read(self, path: str, type_: Any = None, *, default: Any = None) -> Any:
        """Resolve an escaped field path.

        When ``type_`` is given the value is converted with pydantic's lax
        validation (``3`` reads as ``3.0`` for ``float``). Absent paths return
        ``default`` without conversion.
        """
        value = get_path(self._data, self._read_segments(path))
        if value is PATH_MISSING:
            return default
        if type_ is None or value is None:
            return value
        return _adapter(type_).validate_python(value)

    def contains_key(self, path: str) -> bool:
        return get_path(self._data, self._read_segments(path)) is not PATH_MISSING

    def remove(self, path: str) -> Document:
        """Delete the value at an escaped field path; missing paths are a no-op."""
        remove_path(self._data, self._read_segments(path))
        return self

    # Typed readers.

    def read_string(self, path: str) -> str | None:
        return self.read(path, str)

    def read_integer(self, path: str) -> int | None:
        return self.read(path, int)

    def read_long(self, path: str) -> int | None:
        return self.read(path, int)

    def read_double(self, path: str) -> float | None:
        return self.read(path, float)

    def read_boolean(self, path: str) -> bool | None:
        return self.read(path, bool)

    def read_list(self, path: str, item_type: Any = Any) -> list[Any] | None:
        return self.read(path, list[item_type])

    def read_map(self, path: str, value_type: Any = Any) -> dict[str, Any] | None:
        return self.read(path, dict[str, value_type])

    # Reserved fields.

    @property
    def id(self) -> Any:
        return self._data.get(ID_FIELD)

    @id.setter
    def id(self, value: Any) -> None:
        self._data[ID_FIELD] = value

    @property
    def vector(self) -> list[float] | None:
        value = self._data.get(VECTOR_FIELD)
        if value is None:
            return None
        return _adapter(list[float]).validate_python(value)

    @vector.setter
    def vector(self, value: Sequence[float]) -> None:
        self._data[VECTOR_FIELD] = [float(item) for item in value]

    @property
    def vectorize(self) -> str | None:
        return self._data.get(VECTORIZE_FIELD)

    @vectorize.setter
    def vectorize(self, passage: str) -> None:
        self._data[VECTORIZE_FIELD] = passage

    @property
    def similarity(self) -> float | None:
        value = self._data.get(SIMILARITY_FIELD)
        return None if value is None else float(value)

    # Serialization.

    def to_dict(self) -> dict[str, Any]:
        """Deep copy as plain ``dict``/``list`` values."""
        return _plain(self._data)

    def copy(self) -> Document:
        return Document(self.to_dict())

    def to_json(self, **kwargs: Any) -> str:
        return codec.dumps(self._data, **kwargs)

    @classmethod
    def parse(cls, text: str | bytes) -> Document:
        payload = codec.loads(text)
        if not isinstance(payload, dict):
            raise TypeError(f"expected a JSON object, got {type(payload).__name__}")
        return cls(payload)

    @classmethod
    def from_json_dict(cls, payload: Mapping[str, Any]) -> Document:
        """Build a document from a decoded JSON object with envelope values."""
        return cls(codec.decode_value(dict(payload)))


__all__ = [
    "ID_FIELD",
    "SIMILARITY_FIELD",
    "VECTORIZE_FIELD",
    "VECTOR_FIELD",
    "Document",
]
