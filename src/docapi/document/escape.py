"""Escaping grammar for dotted field paths.

A field path is a ``.``-separated list of segments. Inside a segment ``&.``
stands for a literal dot and ``&&`` for a literal ampersand; any other use of
``&`` is rejected.
"""

from __future__ import annotations

from collections.abc import Iterable

from ..errors import InvalidFieldPathError

ESCAPE_CHAR = "&"
SEPARATOR = "."


def escape_segment(segment: str) -> str:
    """Escape a single raw segment so it can be embedded in a field path."""
    out: list[str] = []
    for char in segment:
        if char == ESCAPE_CHAR or char == SEPARATOR:
            out.append(ESCAPE_CHAR)
        out.append(char)
    return "".join(out)


def escape_field_names(*segments: str | Iterable[str]) -> str:
    """Join raw segments into an escaped field path.

    Accepts segments as positional strings or as a single iterable:
    ``escape_field_names("a.b", "c")`` and ``escape_field_names(["a.b", "c"])``
    both return ``"a&.b.c"``. No segments escape to ``""``.

    Raises ``InvalidFieldPathError`` when more than one segment is given and
    the last one is empty: the result would end in an unescaped dot.
    """
    if len(segments) == 1 and not isinstance(segments[0], str):
        parts = list(segments[0])
    else:
        parts = list(segments)
    for part in parts:
        if not isinstance(part, str):
            raise TypeError(f"field path segments must be str, got {type(part)}")
    path = SEPARATOR.join(escape_segment(part) for part in parts)
    if len(parts) > 1 and not parts[-1]:
        raise InvalidFieldPathError(path, "last segment cannot be empty")
    return path


def unescape_field_path(path: str) -> list[str]:
    """Split an escaped field path into raw segments.

    ``""`` yields ``[""]``. Raises ``InvalidFieldPathError`` for a dangling
    ``&``, an ``&`` followed by anything other than ``.`` or ``&``, or an
    unescaped trailing ``.``.
    """
    if not isinstance(path, str):
        raise TypeError(f"field path must be str, got {type(path)}")

    segments: list[str] = []
    current: list[str] = []
    escaping = False
    last = len(path) - 1
    for position, char in enumerate(path):
        if escaping:
            if char != SEPARATOR and char != ESCAPE_CHAR:
                raise InvalidFieldPathError(
                    path, f"invalid escape sequence at position {position}"
                )
            current.append(char)
            escaping = False
        elif char == ESCAPE_CHAR:
            escaping = True
        elif char == SEPARATOR:
            if position == last:
                raise InvalidFieldPathError(
                    path, "path cannot end with an unescaped dot"
                )
            segments.append("".join(current))
            current = []
        else:
            current.append(char)

    if escaping:
        raise InvalidFieldPathError(path, "dangling escape character at end of path")

    segments.append("".join(current))
    return segments


__all__ = [
    "ESCAPE_CHAR",
    "SEPARATOR",
    "escape_field_names",
    "escape_segment",
    "unescape_field_path",
]
