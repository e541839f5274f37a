from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class FindSpec(BaseModel):
    """Immutable description of a find query.

    ``filter``, ``projection`` and ``sort`` are Data API JSON objects and are
    passed to the page fetcher untouched. Use ``with_changes`` to derive a
    modified copy; the copy shares no mutable state with the original.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    filter: dict[str, Any] | None = None
    projection: dict[str, Any] | None = None
    sort: dict[str, Any] | None = None
    skip: int | None = Field(default=None, ge=0)
    limit: int | None = Field(default=None, ge=0)
    include_similarity: bool = False
    include_sort_vector: bool = False
    page_size: int | None = Field(default=None, ge=1)

    def with_changes(self, **changes: Any) -> FindSpec:
        return type(self).model_validate({**self.model_dump(), **changes})

    def command_options(self, page_state: str | None = None) -> dict[str, Any]:
        """Options object for a ``find`` command, camel-cased for the wire."""
        options: dict[str, Any] = {}
        if self.skip is not None:
            options["skip"] = self.skip
        if self.limit is not None:
            options["limit"] = self.limit
        if page_state is not None:
            options["pageState"] = page_state
        if self.include_similarity:
            options["includeSimilarity"] = True
        if self.include_sort_vector:
            options["includeSortVector"] = True
        return options


__all__ = ["FindSpec"]
