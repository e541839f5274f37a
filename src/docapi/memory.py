"""A collection held in process memory.

``InMemoryCollection`` answers ``find`` the way the Data API does, paging
results with opaque ``next_page_state`` tokens, so cursors can be driven
offline. Documents are stored in their JSON form and decoded on the way out.
"""

from __future__ import annotations

import copy
import threading
import uuid
from collections.abc import Iterable, Mapping
from typing import Any

from .collection import _as_document, _FindMixin
from .config import DOCAPI_CONFIG
from .document import ID_FIELD, SIMILARITY_FIELD, VECTOR_FIELD, Document, codec
from .document.escape import unescape_field_path
from .document.paths import PATH_MISSING, get_path, remove_path, set_path
from .errors import DataAPIResponseError, ErrorDescriptor
from .paging import FindSpec, Page
from .query.ast import parse_filter
from .query.eval import cosine_similarity, matches, resolve, sort_key
from .runtime.logging import get_logger


def _already_exists(command: str, document_id: Any) -> DataAPIResponseError:
    return DataAPIResponseError(
        command,
        [
            ErrorDescriptor(
                error_code="DOCUMENT_ALREADY_EXISTS",
                message=f"document with _id {document_id!r} already exists",
            )
        ],
    )


def _parse_page_state(page_state: str | None) -> int:
    if page_state is None:
        return 0
    if not page_state.isdigit():
        raise ValueError(f"invalid page state {page_state!r}")
    return int(page_state)


def _project(document: dict[str, Any], projection: Mapping[str, Any] | None) -> dict[str, Any]:
    if not projection:
        return document

    slices: dict[str, Any] = {}
    flags: dict[str, bool] = {}
    for path, rule in projection.items():
        if isinstance(rule, Mapping):
            slices[path] = rule["$slice"]
        else:
            flags[path] = bool(rule)
    keep_id = flags.pop(ID_FIELD, True)
    includes = [path for path, present in flags.items() if present]

    if includes:
        projected: dict[str, Any] = {}
        if keep_id and ID_FIELD in document:
            projected[ID_FIELD] = document[ID_FIELD]
        for path in [*includes, *slices]:
            segments = unescape_field_path(path)
            value = get_path(document, segments)
            if value is not PATH_MISSING:
                set_path(projected, segments, copy.deepcopy(value))
    else:
        projected = copy.deepcopy(document)
        for path in flags:
            remove_path(projected, unescape_field_path(path))
        if not keep_id:
            projected.pop(ID_FIELD, None)

    for path, rule in slices.items():
        segments = unescape_field_path(path)
        value = get_path(projected, segments)
        if not isinstance(value, list):
            continue
        if isinstance(rule, list):
            start, count = rule
            start = start if start >= 0 else max(len(value) + start, 0)
            set_path(projected, segments, value[start : start + count])
        elif rule >= 0:
            set_path(projected, segments, value[:rule])
        else:
            set_path(projected, segments, value[rule:])
    return projected


class InMemoryCollection(_FindMixin):
    """A named collection whose documents live in a Python list."""

    def __init__(self, name: str = "memory", documents: Iterable[Mapping[str, Any]] = ()) -> None:
        self.name = name
        self.fetch_count = 0
        self._documents: list[dict[str, Any]] = []
        self._lock = threading.Lock()
        self.insert_many(documents)

    def __repr__(self) -> str:
        return f"InMemoryCollection(name={self.name!r}, documents={len(self)})"

    def __len__(self) -> int:
        return len(self._documents)

    def _insert(self, command: str, document: Mapping[str, Any]) -> Any:
        stored = codec.encode_value(_as_document(document).to_dict())
        if ID_FIELD not in stored:
            stored = {ID_FIELD: str(uuid.uuid4()), **stored}
        document_id = stored[ID_FIELD]
        if any(existing[ID_FIELD] == document_id for existing in self._documents):
            raise _already_exists(command, document_id)
        self._documents.append(stored)
        return codec.decode_value(document_id)

    def insert_one(self, document: Mapping[str, Any]) -> Any:
        with self._lock:
            return self._insert("insertOne", document)

    def insert_many(self, documents: Iterable[Mapping[str, Any]]) -> list[Any]:
        with self._lock:
            return [self._insert("insertMany", document) for document in documents]

    def _ordered_matches(
        self, spec: FindSpec
    ) -> tuple[list[tuple[dict[str, Any], float | None]], tuple[float, ...] | None]:
        query = parse_filter(spec.filter)
        with self._lock:
            decoded = [codec.decode_value(stored) for stored in self._documents]
        selected = [document for document in decoded if matches(document, query)]

        sort = dict(spec.sort or {})
        query_vector = sort.pop(VECTOR_FIELD, None)
        if isinstance(query_vector, list):
            vector = tuple(float(item) for item in query_vector)
            scored = [
                (cosine_similarity(vector, document[VECTOR_FIELD]), document)
                for document in selected
                if isinstance(document.get(VECTOR_FIELD), list)
            ]
            scored.sort(key=lambda pair: pair[0], reverse=True)
            return [(document, score) for score, document in scored], vector

        for path, order in reversed(list(sort.items())):
            if order not in (1, -1):
                raise ValueError(f"unsupported sort value for {path!r}: {order!r}")
            selected.sort(
                key=lambda document, path=path: sort_key(resolve(document, path)),
                reverse=order == -1,
            )
        return [(document, None) for document in selected], None

    def find_page(self, spec: FindSpec, page_state: str | None) -> Page[Document]:
        """Serve one page of ``spec``'s results; usable as a cursor page fetcher."""
        self.fetch_count += 1
        offset = _parse_page_state(page_state)
        selected, sort_vector = self._ordered_matches(spec)

        start = spec.skip or 0
        window = selected[start:]
        if spec.limit is not None:
            window = window[: spec.limit]

        page_size = spec.page_size or DOCAPI_CONFIG.page_size
        end = offset + page_size
        items = []
        for document, score in window[offset:end]:
            projected = _project(document, spec.projection)
            if spec.include_similarity and score is not None:
                projected[SIMILARITY_FIELD] = score
            items.append(Document(projected))
        next_page_state = str(end) if end < len(window) else None
        get_logger("memory").debug(
            "find on %s: %d matches, serving %d from offset %d",
            self.name,
            len(window),
            len(items),
            offset,
        )
        return Page.of(
            items,
            next_page_state=next_page_state,
            sort_vector=sort_vector if spec.include_sort_vector else None,
        )


__all__ = ["InMemoryCollection"]
