from pydantic import BaseModel
from typing import Generic, List, Optional, TypeVar

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    """One rendered page of a filtered, sorted list view."""
    items: List[T]
    total: int
    page: int
    page_size: int
    total_pages: int
    start_item: int
    end_item: int
    query: str = ""
    filter: Optional[str] = None
