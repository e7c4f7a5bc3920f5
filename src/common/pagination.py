"""
Pagination over a filtered job list.

Pure helpers compute page counts and slice bounds; ``Paginator`` carries the
one piece of mutable UI state (the current page) and enforces its invariant:

    1 <= current_page <= max(1, total_pages)

Out-of-range navigation requests are ignored rather than clamped or
rejected, and a new filter result always sends the reader back to page 1.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Tuple, TypeVar

T = TypeVar("T")


def total_pages(total_items: int, page_size: int) -> int:
    """
    Number of pages needed for ``total_items``.

    Zero items means zero pages ("nothing to paginate"), not an error.

    Raises:
        ValueError: If page_size is not positive or total_items is negative
    """
    if page_size <= 0:
        raise ValueError(f"page_size must be positive, got {page_size}")
    if total_items < 0:
        raise ValueError(f"total_items must not be negative, got {total_items}")
    return math.ceil(total_items / page_size)


def page_bounds(page: int, page_size: int) -> Tuple[int, int]:
    """
    Slice bounds for a 1-indexed page.

    The upper bound is exclusive and is NOT clamped to the item count;
    Python slicing clamps it for free, other callers must do it themselves.
    """
    first_index = (page - 1) * page_size
    last_index = page * page_size
    return first_index, last_index


@dataclass
class NavigationResult:
    """Outcome of a navigate() request."""
    changed: bool
    page: int
    scroll_to_top: bool = False


class Paginator:
    """
    Current-page state for a list of ``total_items`` shown ``page_size`` at a time.

    Usage:
        paginator = Paginator(total_items=len(matches), page_size=5)
        paginator.navigate(3)
        page_jobs = paginator.slice(matches)
    """

    def __init__(self, total_items: int, page_size: int, current_page: int = 1):
        # Validate eagerly so a bad page size fails at construction
        total_pages(total_items, page_size)
        self.page_size = page_size
        self.total_items = total_items
        self.current_page = 1
        if current_page != 1:
            self.navigate(current_page)

    @property
    def total_pages(self) -> int:
        return total_pages(self.total_items, self.page_size)

    @property
    def first_index(self) -> int:
        return page_bounds(self.current_page, self.page_size)[0]

    @property
    def last_index(self) -> int:
        return page_bounds(self.current_page, self.page_size)[1]

    @property
    def has_prev(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    def navigate(self, page: int) -> NavigationResult:
        """
        Move to ``page`` if it exists.

        Requests outside [1, total_pages] leave the state untouched. A valid
        request sets the page exactly and asks the UI to scroll to the top.
        """
        if page < 1 or page > self.total_pages:
            return NavigationResult(changed=False, page=self.current_page)
        self.current_page = page
        return NavigationResult(changed=True, page=page, scroll_to_top=True)

    def reset(self, total_items: int) -> None:
        """New filter result: adopt its size and go back to page 1."""
        total_pages(total_items, self.page_size)
        self.total_items = total_items
        self.current_page = 1

    def slice(self, items: Sequence[T]) -> List[T]:
        """Items on the current page (upper bound clamped to len(items))."""
        first, last = self.first_index, min(self.last_index, len(items))
        return list(items[first:last])

    def to_dict(self) -> Dict[str, Any]:
        """Pagination metadata for JSON responses."""
        return {
            "page": self.current_page,
            "page_size": self.page_size,
            "total_count": self.total_items,
            "total_pages": self.total_pages,
            "first_index": self.first_index,
            "last_index": min(self.last_index, self.total_items),
            "has_prev": self.has_prev,
            "has_next": self.has_next,
        }
