from .cursor import Cursor, CursorState, PageFetcher
from .page import Page
from .spec import FindSpec

__all__ = ["Cursor", "CursorState", "FindSpec", "Page", "PageFetcher"]
