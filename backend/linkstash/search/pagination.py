# @TASK S1-T1.4 - Pagination over ranked, thresholded results
# @TEST tests/test_pagination.py

"""Fixed-size paging of an already sorted result list.

Page numbers often come from stale UI state (a callback button that still
points at page 5 after the result set shrank), so out-of-range pages are
clamped instead of rejected. An empty list still reports one page.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    """One slice of a sorted sequence."""

    items: list[T]
    current_page: int
    total_pages: int
    total_count: int


def total_pages_for(count: int, page_size: int) -> int:
    """Number of pages needed for *count* items, never less than 1."""
    if page_size <= 0:
        raise ValueError(f"page_size must be positive, got {page_size}")
    return max(1, math.ceil(count / page_size))


def clamp_page(page: int, total_pages: int) -> int:
    return min(max(page, 1), total_pages)


def paginate(sorted_items: Sequence[T], page: int, page_size: int) -> Page[T]:
    """Return the requested page of *sorted_items*, clamping *page* into range."""
    total_pages = total_pages_for(len(sorted_items), page_size)
    current = clamp_page(page, total_pages)
    start = (current - 1) * page_size
    return Page(
        items=list(sorted_items[start : start + page_size]),
        current_page=current,
        total_pages=total_pages,
        total_count=len(sorted_items),
    )
