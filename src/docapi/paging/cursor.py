"""Lazily paged cursor over a server-side result stream."""

from __future__ import annotations

import enum
from collections import deque
from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import Any, Generic, Protocol, TypeVar

from ..errors import CursorStateError
from ..query.ast import as_filter_dict
from ..query.sort import Projection, Sort, projection_to_json, sort_to_json
from ..runtime.logging import get_logger
from .page import Page
from .spec import FindSpec

R = TypeVar("R")
T = TypeVar("T")
R_co = TypeVar("R_co", covariant=True)


class PageFetcher(Protocol[R_co]):
    """Fetch one page for ``spec``, starting at ``page_state`` when given."""

    def __call__(self, spec: FindSpec, page_state: str | None) -> Page[R_co]: ...


class CursorState(enum.Enum):
    IDLE = "idle"
    STARTED = "started"
    CLOSED = "closed"


class Cursor(Generic[R]):
    """Forward-only iteration over paged query results.

    A cursor starts ``IDLE``. Query mutators (``filter``, ``sort``,
    ``limit``...) are only allowed while idle and return a new cursor; the
    receiver is left untouched. The first ``has_next``/``next``/iteration
    moves the cursor to ``STARTED`` and fetches the first page. Later pages
    are fetched with the previous page's ``next_page_state`` once the buffer
    runs dry. ``close`` moves to ``CLOSED`` for good and drops the buffer.

    Fetch errors propagate unchanged and leave the cursor on the page it had,
    so calling ``has_next`` again retries the same page.

    A cursor is not thread-safe. Use one cursor per thread; cursors derived
    from each other share no mutable state.
    """

    def __init__(
        self,
        fetcher: PageFetcher[Any],
        spec: FindSpec | None = None,
        *,
        mapper: Callable[[Any], R] | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._spec = spec if spec is not None else FindSpec()
        self._mapper = mapper
        self._state = CursorState.IDLE
        self._buffer: deque[Any] = deque()
        self._consumed = 0
        self._page: Page[Any] | None = None

    def __repr__(self) -> str:
        return (
            f"Cursor(state={self._state.value}, buffered={len(self._buffer)}, "
            f"consumed={self._consumed})"
        )

    @property
    def state(self) -> CursorState:
        return self._state

    @property
    def spec(self) -> FindSpec:
        return self._spec

    @property
    def buffered_count(self) -> int:
        return len(self._buffer)

    @property
    def consumed_count(self) -> int:
        return self._consumed

    # Query mutators, idle only.

    def _check_idle(self, action: str) -> None:
        if self._state is not CursorState.IDLE:
            raise CursorStateError(
                f"cannot {action} after the cursor has been started", self._state
            )

    def _derive(self, action: str, **changes: Any) -> Cursor[R]:
        self._check_idle(action)
        return Cursor(self._fetcher, self._spec.with_changes(**changes), mapper=self._mapper)

    def filter(self, filter: Any) -> Cursor[R]:
        """Replace the filter with a filter node or a JSON filter mapping."""
        return self._derive("change the filter", filter=as_filter_dict(filter))

    def sort(self, *sorts: Sort | Mapping[str, Any]) -> Cursor[R]:
        return self._derive("change the sort", sort=sort_to_json(*sorts) or None)

    def project(
        self, *projections: Projection | Iterable[Projection] | Mapping[str, Any]
    ) -> Cursor[R]:
        self._check_idle("change the projection")
        if self._mapper is not None:
            raise CursorStateError("cannot call project() after map()", self._state)
        return self._derive(
            "change the projection", projection=projection_to_json(*projections) or None
        )

    def limit(self, limit: int) -> Cursor[R]:
        return self._derive("change the limit", limit=limit)

    def skip(self, skip: int) -> Cursor[R]:
        return self._derive("change skip", skip=skip)

    def page_size(self, page_size: int) -> Cursor[R]:
        return self._derive("change the page size", page_size=page_size)

    def include_similarity(self, include: bool = True) -> Cursor[R]:
        return self._derive("change include_similarity", include_similarity=include)

    def include_sort_vector(self, include: bool = True) -> Cursor[R]:
        return self._derive("change include_sort_vector", include_sort_vector=include)

    def map(self, mapper: Callable[[R], T]) -> Cursor[T]:
        """Return a cursor whose items are passed through ``mapper`` on read."""
        self._check_idle("call map()")
        if self._mapper is not None:
            raise CursorStateError("cannot call map() after map()", self._state)
        return Cursor(self._fetcher, self._spec, mapper=mapper)

    def clone(self) -> Cursor[R]:
        """A fresh idle cursor over the same query, whatever this one's state."""
        return Cursor(self._fetcher, self._spec, mapper=self._mapper)

    # Lifecycle.

    def close(self) -> None:
        self._state = CursorState.CLOSED
        self._buffer.clear()

    def __enter__(self) -> Cursor[R]:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # Iteration.

    def _can_fetch(self) -> bool:
        return self._page is None or self._page.next_page_state is not None

    def _fetch_next_page(self) -> None:
        page_state = None if self._page is None else self._page.next_page_state

        page = self._fetcher(self._spec, page_state)
        get_logger("cursor").debug(
            "page fetch: %d items, more=%s", len(page.items), page.has_next_page
        )
        self._buffer.extend(page.items)
        self._page = page

    def has_next(self) -> bool:
        if self._state is CursorState.CLOSED:
            return False
        if self._state is CursorState.IDLE:
            self._state = CursorState.STARTED
        while not self._buffer and self._can_fetch():
            self._fetch_next_page()
        return bool(self._buffer)

    def _apply(self, item: Any) -> R:
        if self._mapper is None:
            return item
        return self._mapper(item)

    def _take(self) -> R:
        # A failing mapper leaves the item buffered.
        mapped = self._apply(self._buffer[0])
        self._buffer.popleft()
        self._consumed += 1
        return mapped

    def __next__(self) -> R:
        if not self.has_next():
            raise StopIteration
        return self._take()

    next = __next__

    def __iter__(self) -> Iterator[R]:
        return self

    def consume_buffer(self, n: int) -> list[R]:
        """Take up to ``n`` already-buffered items without fetching."""
        if self._state is not CursorState.STARTED:
            return []
        taken: list[R] = []
        while self._buffer and len(taken) < n:
            taken.append(self._take())
        return taken

    def sort_vector(self) -> tuple[float, ...] | None:
        """Sort vector echoed by the server; fetches the first page if idle."""
        if self._page is None and self._state is CursorState.IDLE:
            self._state = CursorState.STARTED
            self._fetch_next_page()
        if self._page is None:
            return None
        return self._page.sort_vector

    # Bulk consumption.

    def _check_bulk(self, action: str) -> bool:
        if self._state is CursorState.CLOSED:
            return False
        if self._state is CursorState.STARTED:
            raise CursorStateError(f"cannot call {action} on a started cursor", self._state)
        return True

    def to_list(self) -> list[R]:
        """Drain the cursor into a list and close it.

        Returns ``[]`` for a closed cursor and raises ``CursorStateError`` for
        one that was already started.
        """
        if not self._check_bulk("to_list()"):
            return []
        try:
            return list(self)
        finally:
            self.close()

    def for_each(self, action: Callable[[R], object]) -> None:
        if not self._check_bulk("for_each()"):
            return
        try:
            for item in self:
                action(item)
        finally:
            self.close()

    def stream(self) -> Iterator[R]:
        """Lazily yield the remaining items, closing the cursor at the end."""
        try:
            while self.has_next():
                yield self.__next__()
        finally:
            self.close()


__all__ = ["Cursor", "CursorState", "PageFetcher"]
