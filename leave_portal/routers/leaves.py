from typing import Optional

from fastapi import APIRouter, Depends, Query

from leave_portal.core.schemas import ApiResponse
from leave_portal.models.leave_request import HistoryFilter, LeaveStatus
from leave_portal.schemas.auth import AuthUser
from leave_portal.schemas.leave import LeaveApplyForm, LeaveRecord, RejectForm
from leave_portal.schemas.pagination import Page
from leave_portal.services import search_filter as sf
from leave_portal.services.api_client import LeaveApiClient
from leave_portal.services.leave_workflow import LeaveScope, LeaveWorkflow
from leave_portal.services.list_view import render_list
from leave_portal.services.notification import NotificationService
from leave_portal.store.state import Store
from leave_portal.routers.deps import (
    get_api_client, get_current_user, get_notifier, get_store, require_approver,
)

router = APIRouter(prefix="/leaves", tags=["leaves"])

MY_LEAVES_VIEW = "my-leaves"
APPROVALS_VIEW = "approvals"
PENDING_VIEW = "pending"
HISTORY_VIEW = "history"


@router.get("/mine", response_model=Page[LeaveRecord])
async def my_leaves(
    q: Optional[str] = None,
    page: Optional[int] = Query(None, ge=1),
    page_size: Optional[int] = None,
    store: Store = Depends(get_store),
    client: LeaveApiClient = Depends(get_api_client),
    user: AuthUser = Depends(get_current_user),
):
    """Applicant's own leaves, pending first."""
    leaves = await LeaveWorkflow(client, store).refresh(LeaveScope.MINE)
    return render_list(
        store.view(MY_LEAVES_VIEW), leaves, sf.MY_LEAVE_FIELDS,
        query=q, page=page, page_size=page_size, sort_status=True,
    )


@router.post("/apply", response_model=ApiResponse[LeaveRecord])
async def apply_leave(
    form: LeaveApplyForm,
    store: Store = Depends(get_store),
    client: LeaveApiClient = Depends(get_api_client),
    notifier: NotificationService = Depends(get_notifier),
    user: AuthUser = Depends(get_current_user),
):
    record = await LeaveWorkflow(client, store).apply(form.from_date, form.to_date, form.subject, form.reason)
    return ApiResponse.ok(record, toast=notifier.success("Leave applied successfully!"))


@router.get("/approvals", response_model=Page[LeaveRecord])
async def approvals(
    q: Optional[str] = None,
    page: Optional[int] = Query(None, ge=1),
    page_size: Optional[int] = None,
    store: Store = Depends(get_store),
    client: LeaveApiClient = Depends(get_api_client),
    user: AuthUser = Depends(require_approver),
):
    """Every leave reported to the approver, pending first."""
    leaves = await LeaveWorkflow(client, store).refresh(LeaveScope.ALL)
    return render_list(
        store.view(APPROVALS_VIEW), leaves, sf.APPROVAL_FIELDS,
        query=q, page=page, page_size=page_size, sort_status=True,
    )


@router.get("/pending", response_model=Page[LeaveRecord])
async def pending_queue(
    q: Optional[str] = None,
    page: Optional[int] = Query(None, ge=1),
    page_size: Optional[int] = None,
    store: Store = Depends(get_store),
    client: LeaveApiClient = Depends(get_api_client),
    user: AuthUser = Depends(require_approver),
):
    """Leaves still waiting for a decision."""
    leaves = await LeaveWorkflow(client, store).refresh(LeaveScope.PENDING)
    return render_list(
        store.view(PENDING_VIEW), leaves, sf.APPROVAL_FIELDS,
        query=q, page=page, page_size=page_size,
    )


@router.post("/{leave_id}/approve", response_model=ApiResponse[LeaveRecord])
async def approve_leave(
    leave_id: str,
    store: Store = Depends(get_store),
    client: LeaveApiClient = Depends(get_api_client),
    notifier: NotificationService = Depends(get_notifier),
    user: AuthUser = Depends(require_approver),
):
    record = await LeaveWorkflow(client, store).approve(leave_id)
    return ApiResponse.ok(record, toast=notifier.success("Leave approved successfully"))


@router.post("/{leave_id}/reject", response_model=ApiResponse[LeaveRecord])
async def reject_leave(
    leave_id: str,
    form: RejectForm,
    store: Store = Depends(get_store),
    client: LeaveApiClient = Depends(get_api_client),
    notifier: NotificationService = Depends(get_notifier),
    user: AuthUser = Depends(require_approver),
):
    record = await LeaveWorkflow(client, store).reject(leave_id, form.rejection_reason)
    return ApiResponse.ok(record, toast=notifier.success("Leave rejected successfully"))


@router.get("/history", response_model=Page[LeaveRecord])
async def history(
    q: Optional[str] = None,
    filter: HistoryFilter = HistoryFilter.ALL,
    page: Optional[int] = Query(None, ge=1),
    page_size: Optional[int] = None,
    store: Store = Depends(get_store),
    client: LeaveApiClient = Depends(get_api_client),
    user: AuthUser = Depends(require_approver),
):
    """Processed leaves only, in server order."""
    leaves = await LeaveWorkflow(client, store).refresh(LeaveScope.ALL)
    processed = [leave for leave in leaves if leave.lifecycle_status and leave.lifecycle_status.is_terminal]
    if filter != HistoryFilter.ALL:
        processed = [leave for leave in processed if leave.lifecycle_status == LeaveStatus(filter.value)]

    state = store.view(HISTORY_VIEW)
    if page is not None:
        state.set_page(page)
    state.set_filter(filter.value)
    return render_list(state, processed, sf.HISTORY_FIELDS, query=q, page_size=page_size)
