from collections.abc import Generator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

import pytest

from .config import DOCAPI_CONFIG, DocapiConfig
from .paging import FindSpec, Page

_FIELDS = (
    "endpoint",
    "token",
    "keyspace",
    "api_path",
    "timeout_sec",
    "page_size",
    "insert_chunk_size",
    "insert_concurrency",
    "log_level",
)


@dataclass(frozen=True)
class _DocapiConfigSnapshot:
    values: dict[str, Any]

    @classmethod
    def capture(cls, config: DocapiConfig = DOCAPI_CONFIG) -> "_DocapiConfigSnapshot":
        return cls(values={name: getattr(config, name) for name in _FIELDS})

    def restore(self, config: DocapiConfig = DOCAPI_CONFIG) -> None:
        for name, value in self.values.items():
            setattr(config, name, value)


def _apply_test_config() -> DocapiConfig:
    DOCAPI_CONFIG.endpoint = "http://docapi.test"
    DOCAPI_CONFIG.token = "test-token"
    DOCAPI_CONFIG.keyspace = "test_keyspace"
    DOCAPI_CONFIG.api_path = "api/json/v1"
    DOCAPI_CONFIG.timeout_sec = 5.0
    DOCAPI_CONFIG.page_size = 20
    DOCAPI_CONFIG.insert_chunk_size = 50
    DOCAPI_CONFIG.insert_concurrency = 1
    DOCAPI_CONFIG.log_level = "DEBUG"
    return DOCAPI_CONFIG


@contextmanager
def docapi_test_env() -> Generator[DocapiConfig, None, None]:
    """Point ``DOCAPI_CONFIG`` at test values, restoring it on exit."""
    snapshot = _DocapiConfigSnapshot.capture()
    config = _apply_test_config()
    try:
        yield config
    finally:
        snapshot.restore()


@dataclass
class ScriptedPageFetcher:
    """Page fetcher serving canned pages in order.

    Every call is recorded as ``(spec, page_state)``. ``fail_on`` maps a call
    number (1-based) to an exception raised instead of serving a page; the
    failed call does not consume a page.
    """

    pages: Sequence[Page[Any]]
    fail_on: dict[int, BaseException] = field(default_factory=dict)
    calls: list[tuple[FindSpec, str | None]] = field(default_factory=list)
    _served: int = 0

    @classmethod
    def paged(cls, items: Sequence[Any], page_size: int) -> "ScriptedPageFetcher":
        """Split ``items`` into pages linked by ``"p<n>"`` page-state tokens."""
        chunks = [items[start : start + page_size] for start in range(0, len(items), page_size)]
        if not chunks:
            chunks = [[]]
        pages = [
            Page.of(chunk, next_page_state=f"p{index + 1}" if index + 1 < len(chunks) else None)
            for index, chunk in enumerate(chunks)
        ]
        return cls(pages=pages)

    def __call__(self, spec: FindSpec, page_state: str | None) -> Page[Any]:
        self.calls.append((spec, page_state))
        error = self.fail_on.get(len(self.calls))
        if error is not None:
            raise error
        if self._served >= len(self.pages):
            raise AssertionError(f"no scripted page left for call {len(self.calls)}")
        page = self.pages[self._served]
        self._served += 1
        return page

    @property
    def fetch_count(self) -> int:
        return len(self.calls)

    @property
    def page_states(self) -> list[str | None]:
        return [page_state for _, page_state in self.calls]


@pytest.fixture()
def docapi_test_config() -> Generator[DocapiConfig, None, None]:
    """Configure docapi with deterministic test settings for the test."""
    with docapi_test_env() as config:
        yield config
