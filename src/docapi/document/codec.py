"""JSON envelopes for scalar types that plain JSON cannot carry.

The Data API wraps timestamps, UUIDs, binary blobs and object ids in
single-key objects (``{"$date": 1700000000000}``). ``encode_value`` and
``decode_value`` convert between those envelopes and Python values.
"""

from __future__ import annotations

import base64
import datetime
import json
import re
import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

DATE_KEY = "$date"
UUID_KEY = "$uuid"
BINARY_KEY = "$binary"
OBJECT_ID_KEY = "$objectId"
ENVELOPE_KEYS = frozenset({DATE_KEY, UUID_KEY, BINARY_KEY, OBJECT_ID_KEY})

_OBJECT_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")
_EPOCH = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)
_MILLISECOND = datetime.timedelta(milliseconds=1)


@dataclass(frozen=True)
class ObjectId:
    """A 12-byte object identifier in its 24-character hex form."""

    hex: str

    def __post_init__(self) -> None:
        if not _OBJECT_ID_PATTERN.match(self.hex):
            raise ValueError(f"invalid ObjectId {self.hex!r}")
        object.__setattr__(self, "hex", self.hex.lower())

    def __str__(self) -> str:
        return self.hex


def _encode_datetime(value: datetime.datetime) -> dict[str, int]:
    if value.tzinfo is None:
        value = value.replace(tzinfo=datetime.timezone.utc)
    return {DATE_KEY: (value - _EPOCH) // _MILLISECOND}


def encode_value(value: Any) -> Any:
    """Convert ``value`` into plain JSON-compatible structures."""
    match value:
        case bool() | int() | float() | str() | None:
            return value
        case datetime.datetime():
            return _encode_datetime(value)
        case datetime.date():
            return _encode_datetime(
                datetime.datetime.combine(value, datetime.time(), datetime.timezone.utc)
            )
        case uuid.UUID():
            return {UUID_KEY: str(value)}
        case ObjectId():
            return {OBJECT_ID_KEY: value.hex}
        case bytes() | bytearray():
            return {BINARY_KEY: base64.b64encode(bytes(value)).decode("ascii")}
        case Mapping():
            out: dict[str, Any] = {}
            for key, item in value.items():
                if not isinstance(key, str):
                    raise TypeError(f"document keys must be str, got {type(key)}")
                out[key] = encode_value(item)
            return out
        case list() | tuple():
            return [encode_value(item) for item in value]
        case _:
            raise TypeError(f"cannot encode value of type {type(value).__name__}")


def _decode_envelope(key: str, payload: Any) -> Any:
    if key == DATE_KEY and isinstance(payload, int | float) and not isinstance(payload, bool):
        return _EPOCH + datetime.timedelta(milliseconds=payload)
    if key == UUID_KEY and isinstance(payload, str):
        return uuid.UUID(payload)
    if key == BINARY_KEY and isinstance(payload, str):
        return base64.b64decode(payload)
    if key == OBJECT_ID_KEY and isinstance(payload, str):
        return ObjectId(payload)
    return None


def decode_value(value: Any) -> Any:
    """Inverse of ``encode_value`` for values produced by ``json.loads``."""
    match value:
        case dict():
            if len(value) == 1:
                ((key, payload),) = value.items()
                decoded = _decode_envelope(key, payload)
                if decoded is not None:
                    return decoded
            return {key: decode_value(item) for key, item in value.items()}
        case list():
            return [decode_value(item) for item in value]
        case _:
            return value


def dumps(value: Any, **kwargs: Any) -> str:
    return json.dumps(encode_value(value), **kwargs)


def loads(text: str | bytes) -> Any:
    return decode_value(json.loads(text))


__all__ = [
    "BINARY_KEY",
    "DATE_KEY",
    "ENVELOPE_KEYS",
    "OBJECT_ID_KEY",
    "UUID_KEY",
    "ObjectId",
    "decode_value",
    "dumps",
    "encode_value",
    "loads",
]
