"""
docapi: document addressing and paged cursors for JSON document APIs.

This package uses a src-layout. Import the package as `docapi`.
"""

from importlib.metadata import version

__version__ = version("docapi")

from .config import DOCAPI_CONFIG, ClientOptions, DocapiConfig, load_env
from .errors import (
    CursorStateError,
    DataAPIResponseError,
    DocapiError,
    ErrorDescriptor,
    InvalidFieldPathError,
)
from .runtime import configure_logging, get_logger
from .document import (
    PATH_MISSING,
    Document,
    ObjectId,
    escape_field_names,
    escape_segment,
    unescape_field_path,
)
from .query import F, Filter, Projection, Sort
from .paging import Cursor, CursorState, FindSpec, Page, PageFetcher
from .transport import CommandRunner
from .collection import Collection
from .memory import InMemoryCollection

__all__ = [
    "__version__",
    "DOCAPI_CONFIG",
    "PATH_MISSING",
    "ClientOptions",
    "Collection",
    "CommandRunner",
    "Cursor",
    "CursorState",
    "CursorStateError",
    "DataAPIResponseError",
    "DocapiConfig",
    "DocapiError",
    "Document",
    "ErrorDescriptor",
    "F",
    "Filter",
    "FindSpec",
    "InMemoryCollection",
    "InvalidFieldPathError",
    "ObjectId",
    "Page",
    "PageFetcher",
    "Projection",
    "Sort",
    "configure_logging",
    "escape_field_names",
    "escape_segment",
    "get_logger",
    "load_env",
    "unescape_field_path",
]
