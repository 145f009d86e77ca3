from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Generic, List, Sequence, TypeVar

from signaldesk.settings import PAGE_SIZE_CHOICES

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    items: List[T] = field(default_factory=list)
    total_items: int = 0
    total_pages: int = 0
    page: int = 1
    page_size: int = 20

    @property
    def start_index(self) -> int:
        """1-based index of the first row shown, 0 when the page is empty."""
        return (self.page - 1) * self.page_size + 1 if self.items else 0

    @property
    def end_index(self) -> int:
        return (self.page - 1) * self.page_size + len(self.items) if self.items else 0


def total_pages(total_items: int, page_size: int) -> int:
    if page_size < 1:
        raise ValueError(f"page_size must be a positive integer, got {page_size}")
    return math.ceil(total_items / page_size) if total_items > 0 else 0


def paginate(records: Sequence[Any], page: int, page_size: int) -> Page[Any]:
    """
    Slice one page out of an already filtered and sorted collection.

    Pages are 1-indexed; a page below 1 is read as page 1. A page past the end
    yields no items; resetting it is up to whoever owns the view state.
    """
    pages = total_pages(len(records), page_size)
    page = max(1, int(page))
    start = min((page - 1) * page_size, len(records))
    end = min(start + page_size, len(records))
    return Page(
        items=list(records[start:end]),
        total_items=len(records),
        total_pages=pages,
        page=page,
        page_size=page_size,
    )


__all__ = ["PAGE_SIZE_CHOICES", "Page", "paginate", "total_pages"]
