"""Pagination Calculator — offset and page metadata as pure functions of (page, limit, total).

Invariants:
    - offset = (page - 1) * limit
    - total_pages = ceil(total_count / limit), 0 when total_count == 0
    - has_more = page * limit < total_count
    - PageResult is built from the same total_count that accompanied the page query
"""

import math
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


def compute_offset(page: int, limit: int) -> int:
    return (page - 1) * limit


def compute_total_pages(total_count: int, limit: int) -> int:
    return math.ceil(total_count / limit) if total_count > 0 else 0


def compute_has_more(page: int, limit: int, total_count: int) -> bool:
    return page * limit < total_count


@dataclass(frozen=True)
class PageResult(Generic[T]):
    items: tuple[T, ...]
    page: int
    limit: int
    total_count: int
    total_pages: int
    has_more: bool

    def pagination(self) -> dict:
        """Pagination block of the response envelope, keyed by wire name."""
        return {
            "page": self.page,
            "limit": self.limit,
            "totalCount": self.total_count,
            "totalPages": self.total_pages,
            "hasMore": self.has_more,
        }


def build_page(
    items: list[T] | tuple[T, ...], page: int, limit: int, total_count: int,
) -> PageResult[T]:
    return PageResult(
        items=tuple(items),
        page=page,
        limit=limit,
        total_count=total_count,
        total_pages=compute_total_pages(total_count, limit),
        has_more=compute_has_more(page, limit, total_count),
    )
