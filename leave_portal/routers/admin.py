from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query

from leave_portal.core.schemas import ApiResponse
from leave_portal.schemas.pagination import Page
from leave_portal.services.admin_service import AdminService, get_resource
from leave_portal.services.api_client import LeaveApiClient
from leave_portal.services.list_view import render_list
from leave_portal.services.notification import NotificationService
from leave_portal.store.state import Store
from leave_portal.routers.deps import get_api_client, get_notifier, get_store, require_admin

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    dependencies=[Depends(require_admin)]
)


def _view_name(resource: str) -> str:
    return f"admin:{resource}"


@router.get("/{resource}", response_model=Page[Dict[str, Any]])
async def list_records(
    resource: str,
    q: Optional[str] = None,
    page: Optional[int] = Query(None, ge=1),
    page_size: Optional[int] = None,
    store: Store = Depends(get_store),
    client: LeaveApiClient = Depends(get_api_client),
):
    master = get_resource(resource)
    records = await client.list_records(master.name)
    return render_list(
        store.view(_view_name(resource)), records, master.search_fields,
        query=q, page=page, page_size=page_size,
    )


@router.post("/{resource}", response_model=ApiResponse[list])
async def create_record(
    resource: str,
    payload: Dict[str, Any] = Body(...),
    client: LeaveApiClient = Depends(get_api_client),
    notifier: NotificationService = Depends(get_notifier),
):
    records = await AdminService(client).create(resource, payload)
    return ApiResponse.ok(records, toast=notifier.success(f"{get_resource(resource).label} created successfully"))


@router.put("/{resource}/{record_id}", response_model=ApiResponse[list])
async def update_record(
    resource: str,
    record_id: str,
    payload: Dict[str, Any] = Body(...),
    client: LeaveApiClient = Depends(get_api_client),
    notifier: NotificationService = Depends(get_notifier),
):
    records = await AdminService(client).update(resource, record_id, payload)
    return ApiResponse.ok(records, toast=notifier.success(f"{get_resource(resource).label} updated successfully"))


@router.delete("/{resource}/{record_id}", response_model=ApiResponse[list])
async def delete_record(
    resource: str,
    record_id: str,
    client: LeaveApiClient = Depends(get_api_client),
    notifier: NotificationService = Depends(get_notifier),
):
    records = await AdminService(client).delete(resource, record_id)
    return ApiResponse.ok(records, toast=notifier.success(f"{get_resource(resource).label} deleted successfully"))
