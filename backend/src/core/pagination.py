"""
Pagination helpers
1-indexed pages with totals counted before slicing
"""
import math
from dataclasses import dataclass
from typing import Generic, List, Sequence, TypeVar


T = TypeVar("T")


def page_offset(page: int, page_size: int) -> int:
    """Rows to skip for a 1-indexed page"""
    return (page - 1) * page_size


def total_pages(total: int, page_size: int) -> int:
    if total <= 0 or page_size <= 0:
        return 0
    return math.ceil(total / page_size)


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of a filtered, ordered listing"""
    items: List[T]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return total_pages(self.total, self.page_size)

    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous_page(self) -> bool:
        return self.page > 1

    def extra_fields(self) -> dict:
        """Additional top-level keys rendered next to the page"""
        return {}


def paginate(items: Sequence[T], page: int, page_size: int) -> Page[T]:
    """Slice an already ordered in-memory sequence"""
    start = page_offset(page, page_size)
    return Page(list(items[start:start + page_size]), len(items), page, page_size)
