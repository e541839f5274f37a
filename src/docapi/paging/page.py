from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Generic, TypeVar

R = TypeVar("R")


@dataclass(frozen=True)
class Page(Generic[R]):
    """One page of results plus the token for the next page, if any."""

    items: tuple[R, ...] = field(default_factory=tuple)
    next_page_state: str | None = None
    sort_vector: tuple[float, ...] | None = None

    @classmethod
    def of(
        cls,
        items: Sequence[R],
        next_page_state: str | None = None,
        sort_vector: Sequence[float] | None = None,
    ) -> Page[R]:
        return cls(
            items=tuple(items),
            next_page_state=next_page_state,
            sort_vector=None if sort_vector is None else tuple(sort_vector),
        )

    @property
    def has_next_page(self) -> bool:
        return self.next_page_state is not None

    def is_empty(self) -> bool:
        return not self.items

    def first(self) -> R | None:
        return self.items[0] if self.items else None

    def one(self) -> R:
        if len(self.items) != 1:
            raise ValueError(
                f"page holds {len(self.items)} items; expected exactly one"
            )
        return self.items[0]


__all__ = ["Page"]
