from typing import Optional, Sequence, TypeVar

from leave_portal.core.exceptions import FormValidationError
from leave_portal.schemas.pagination import Page
from leave_portal.services.paginator import PaginationState
from leave_portal.services.search_filter import FieldGetter, search_filter
from leave_portal.services.status_sorter import sort_by_status

T = TypeVar("T")


def render_list(
    state: PaginationState,
    records: Sequence[T],
    fields: Sequence[FieldGetter],
    query: Optional[str] = None,
    page: Optional[int] = None,
    page_size: Optional[int] = None,
    sort_status: bool = False,
) -> Page:
    """
    filter -> (sort) -> paginate for one list view.

    An explicit `page` is applied first, so a changed query or page size
    in the same request still lands on page 1.
    """
    if page is not None:
        state.set_page(page)
    state.set_query(query)
    if page_size is not None:
        try:
            state.set_page_size(page_size)
        except ValueError as e:
            raise FormValidationError(str(e), field="page_size")

    filtered = search_filter(records, state.query, fields)
    if sort_status:
        filtered = sort_by_status(filtered)
    items = state.slice(filtered)

    return Page(
        items=items,
        total=state.total_items,
        page=state.current_page,
        page_size=state.items_per_page,
        total_pages=state.total_pages,
        start_item=state.start_item,
        end_item=state.end_item,
        query=state.query,
        filter=state.filter,
    )
