from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from .document import Document, codec
from .paging import Cursor, FindSpec, Page
from .query.ast import as_filter_dict
from .query.sort import Projection, Sort, projection_to_json, sort_to_json
from .runtime.logging import get_logger
from .transport.http import CommandRunner


def _as_document(value: Mapping[str, Any]) -> Document:
    return value if isinstance(value, Document) else Document(value)


def _chunks(items: Sequence[Any], size: int) -> list[Sequence[Any]]:
    if size < 1:
        raise ValueError(f"chunk size must be >= 1, got {size}")
    return [items[start : start + size] for start in range(0, len(items), size)]


class _FindMixin(ABC):
    """``find``/``find_one`` on top of a ``find_page`` page fetcher."""

    @abstractmethod
    def find_page(self, spec: FindSpec, page_state: str | None) -> Page[Document]: ...

    def find(
        self,
        filter: Any = None,
        *,
        sort: Sort | Mapping[str, Any] | Iterable[Sort] | None = None,
        projection: Projection | Iterable[Projection] | Mapping[str, Any] | None = None,
        skip: int | None = None,
        limit: int | None = None,
        include_similarity: bool = False,
        include_sort_vector: bool = False,
        page_size: int | None = None,
    ) -> Cursor[Document]:
        """Return an idle cursor over documents matching ``filter``."""
        spec = FindSpec(
            filter=as_filter_dict(filter),
            sort=sort_to_json(*_listify(sort)) or None,
            projection=projection_to_json(*_listify(projection)) or None,
            skip=skip,
            limit=limit,
            include_similarity=include_similarity,
            include_sort_vector=include_sort_vector,
            page_size=page_size,
        )
        return Cursor(self.find_page, spec)

    def find_one(
        self,
        filter: Any = None,
        *,
        sort: Sort | Mapping[str, Any] | Iterable[Sort] | None = None,
        projection: Projection | Iterable[Projection] | Mapping[str, Any] | None = None,
        include_similarity: bool = False,
    ) -> Document | None:
        cursor = self.find(
            filter,
            sort=sort,
            projection=projection,
            limit=1,
            include_similarity=include_similarity,
        )
        with cursor:
            return next(cursor, None)

    def distinct(
        self,
        field_path: str,
        filter: Any = None,
        *,
        type_: Any = None,
        page_size: int | None = None,
    ) -> Iterator[Any]:
        """Yield the distinct values stored at ``field_path``, in first-seen order.

        ``field_path`` is an escaped path as accepted by ``Document.read``;
        documents without it are skipped. Values are compared by their JSON
        form, so ``1`` and ``True`` are distinct and map key order matters.
        Values seen on earlier pages are not repeated. The underlying cursor
        is closed when the generator is exhausted or closed.
        """
        seen: set[str] = set()
        with self.find(filter, page_size=page_size) as cursor:
            for document in cursor:
                if not document.contains_key(field_path):
                    continue
                value = document.read(field_path, type_)
                key = codec.dumps(value)
                if key in seen:
                    continue
                seen.add(key)
                yield value


def _listify(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, Mapping | Sort | Projection):
        return [value]
    return list(value)


class Collection(_FindMixin):
    """A remote collection addressed through a ``CommandRunner``."""

    def __init__(self, name: str, runner: CommandRunner) -> None:
        self.name = name
        self.runner = runner

    def __repr__(self) -> str:
        return f"Collection(name={self.name!r})"

    def _run(self, command: str, payload: dict[str, Any]) -> dict[str, Any]:
        return self.runner.run(self.name, command, payload)

    def find_page(self, spec: FindSpec, page_state: str | None) -> Page[Document]:
        """Fetch one page of ``find`` results; usable as a cursor page fetcher."""
        payload: dict[str, Any] = {}
        if spec.filter is not None:
            payload["filter"] = spec.filter
        if spec.sort is not None:
            payload["sort"] = spec.sort
        if spec.projection is not None:
            payload["projection"] = spec.projection
        options = spec.command_options(page_state)
        if options:
            payload["options"] = options

        body = self._run("find", payload)
        data = body.get("data") or {}
        status = body.get("status") or {}
        documents = [Document(item) for item in data.get("documents") or []]
        sort_vector = status.get("sortVector") if spec.include_sort_vector else None
        return Page.of(
            documents,
            next_page_state=data.get("nextPageState"),
            sort_vector=sort_vector,
        )

    def find_one(
        self,
        filter: Any = None,
        *,
        sort: Sort | Mapping[str, Any] | Iterable[Sort] | None = None,
        projection: Projection | Iterable[Projection] | Mapping[str, Any] | None = None,
        include_similarity: bool = False,
    ) -> Document | None:
        payload: dict[str, Any] = {}
        filter_json = as_filter_dict(filter)
        if filter_json is not None:
            payload["filter"] = filter_json
        sort_json = sort_to_json(*_listify(sort))
        if sort_json:
            payload["sort"] = sort_json
        projection_json = projection_to_json(*_listify(projection))
        if projection_json:
            payload["projection"] = projection_json
        if include_similarity:
            payload["options"] = {"includeSimilarity": True}

        body = self._run("findOne", payload)
        document = (body.get("data") or {}).get("document")
        return None if document is None else Document(document)

    def insert_one(self, document: Mapping[str, Any]) -> Any:
        """Insert one document and return its id."""
        payload = {"document": _as_document(document).to_dict()}
        body = self._run("insertOne", payload)
        return body["status"]["insertedIds"][0]

    def insert_many(
        self,
        documents: Iterable[Mapping[str, Any]],
        *,
        ordered: bool = False,
        chunk_size: int | None = None,
        concurrency: int | None = None,
    ) -> list[Any]:
        """Insert documents in chunks and return their ids in input order.

        Chunks are sent by up to ``concurrency`` worker threads. Ordered
        inserts must run with a concurrency of 1.
        """
        options = self.runner.options
        chunk_size = chunk_size if chunk_size is not None else options.insert_chunk_size
        concurrency = concurrency if concurrency is not None else options.insert_concurrency
        if concurrency < 1:
            raise ValueError(f"concurrency must be >= 1, got {concurrency}")
        if ordered and concurrency > 1:
            raise ValueError("cannot run an ordered insert_many concurrently")

        plain = [_as_document(document).to_dict() for document in documents]
        chunks = _chunks(plain, chunk_size)
        logger = get_logger("collection")

        def insert_chunk(chunk: Sequence[Any]) -> list[Any]:
            logger.debug("insert block of %d documents into %s", len(chunk), self.name)
            body = self._run(
                "insertMany",
                {"documents": list(chunk), "options": {"ordered": ordered}},
            )
            return list(body["status"]["insertedIds"])

        with ThreadPoolExecutor(max_workers=concurrency) as executor:
            results = list(executor.map(insert_chunk, chunks))
        return [inserted for chunk_ids in results for inserted in chunk_ids]


__all__ = ["Collection"]
