import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, TypeVar

from leave_portal.core.config import settings

T = TypeVar("T")


def total_pages(total_items: int, page_size: int) -> int:
    if page_size <= 0:
        raise ValueError("page_size must be positive")
    return max(math.ceil(total_items / page_size), 0)


def paginate(items: Sequence[T], page: int, page_size: int) -> List[T]:
    """items[(page-1)*page_size : page*page_size]"""
    if page_size <= 0:
        raise ValueError("page_size must be positive")
    start = (page - 1) * page_size
    if start < 0:
        return []
    return list(items[start:start + page_size])


@dataclass
class PaginationState:
    """
    Page cursor owned by one list view.

    The view calls `set_query` before filtering and `sync` after, so a
    stale page number is never applied to a freshly filtered list.
    """
    current_page: int = 1
    items_per_page: int = settings.default_page_size
    query: str = ""
    filter: Optional[str] = None
    total_items: int = 0

    @property
    def total_pages(self) -> int:
        return total_pages(self.total_items, self.items_per_page)

    @property
    def start_item(self) -> int:
        if self.total_items == 0:
            return 0
        return (self.current_page - 1) * self.items_per_page + 1

    @property
    def end_item(self) -> int:
        return min(self.current_page * self.items_per_page, self.total_items)

    def set_query(self, query: Optional[str]) -> None:
        query = query or ""
        if query != self.query:
            self.query = query
            self.current_page = 1

    def set_filter(self, value: Optional[str]) -> None:
        if value != self.filter:
            self.filter = value
            self.current_page = 1

    def set_page_size(self, page_size: int) -> None:
        if page_size not in settings.page_size_options:
            raise ValueError(f"page size must be one of {settings.page_size_options}")
        if page_size != self.items_per_page:
            self.items_per_page = page_size
            self.current_page = 1

    def set_page(self, page: int) -> None:
        self.current_page = max(page, 1)

    def sync(self, total_items: int) -> None:
        """Re-clamps the page after the filtered collection changed size."""
        self.total_items = total_items
        pages = self.total_pages
        if self.current_page > pages and pages > 0:
            self.current_page = 1
        elif pages == 0:
            self.current_page = 1

    def next(self) -> None:
        if self.current_page < self.total_pages:
            self.current_page += 1

    def previous(self) -> None:
        if self.current_page > 1:
            self.current_page -= 1

    def slice(self, items: Sequence[T]) -> List[T]:
        self.sync(len(items))
        return paginate(items, self.current_page, self.items_per_page)
