# transaction_view/core/pagination.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple, TypeVar

T = TypeVar("T")

PAGE_WINDOW_SIZE = 5


@dataclass(frozen=True)
class Page:
    """One page of rows plus the metadata the navigation controls need."""

    rows: Tuple
    total_count: int
    total_pages: int
    current_page: int
    page_window: Tuple[int, ...]
    start_index: int
    end_index: int

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def summary(self) -> str:
        noun = "transaction" if self.total_count == 1 else "transactions"
        if not self.total_count:
            return f"Showing 0 of 0 {noun}"
        first = self.start_index + 1
        last = min(self.end_index, self.total_count)
        return f"Showing {first}-{last} of {self.total_count} {noun}"


def total_pages(count: int, per_page: int) -> int:
    if per_page <= 0:
        raise ValueError("per_page must be positive")
    return max(1, math.ceil(count / per_page))


def clamp_page(page: int, pages: int) -> int:
    return min(max(1, int(page)), max(1, pages))


def page_slice(rows: Sequence[T], page: int, per_page: int) -> List[T]:
    start = (page - 1) * per_page
    return list(rows[max(start, 0):max(start + per_page, 0)])


def page_window(current: int, pages: int, size: int = PAGE_WINDOW_SIZE) -> Tuple[int, ...]:
    """Up to ``size`` page numbers centered on ``current``.

    Near either end the window is pinned to that end so it always shows
    ``min(size, pages)`` buttons.
    """
    count = min(size, pages)
    half = size // 2
    if pages <= size or current <= half + 1:
        first = 1
    elif current >= pages - half:
        first = pages - size + 1
    else:
        first = current - half
    return tuple(range(first, first + count))


def paginate(rows: Sequence[T], page: int, per_page: int) -> Page:
    """Slice ``rows`` for ``page``; out of range pages yield an empty slice."""
    pages = total_pages(len(rows), per_page)
    start = (page - 1) * per_page
    return Page(
        rows=tuple(page_slice(rows, page, per_page)),
        total_count=len(rows),
        total_pages=pages,
        current_page=page,
        page_window=page_window(page, pages),
        start_index=start,
        end_index=start + per_page,
    )
