"""Page/limit parsing and paged results for list queries."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


@dataclass(frozen=True)
class Pagination:

    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @staticmethod
    def from_raw(
        page: str | int | None = None,
        limit: str | int | None = None,
        default_limit: int = DEFAULT_LIMIT,
        max_limit: int = MAX_LIMIT,
    ) -> Pagination:
        """Lenient parsing: junk falls back to defaults, values are clamped."""
        page_value = max(_read_int(page, DEFAULT_PAGE), 1)
        limit_value = min(max(_read_int(limit, default_limit), 1), max_limit)
        return Pagination(page=page_value, limit=limit_value)


@dataclass(frozen=True)
class Page(Generic[T]):

    items: list[T]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous_page(self) -> bool:
        return self.page > 1


def _read_int(raw: str | int | None, default: int) -> int:
    if isinstance(raw, bool):
        return default
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        try:
            return int(raw.strip())
        except ValueError:
            return default
    return default
