from fastapi import APIRouter, Depends

from leave_portal.core.schemas import ApiResponse
from leave_portal.schemas.admin import HierarchyNode
from leave_portal.services.api_client import LeaveApiClient
from leave_portal.services.hierarchy import count_by_type, fetch_hierarchy
from leave_portal.routers.deps import get_api_client, require_admin

router = APIRouter(prefix="/hierarchy", tags=["hierarchy"])


@router.get("", response_model=ApiResponse[HierarchyNode])
async def hierarchy(
    client: LeaveApiClient = Depends(get_api_client),
    user=Depends(require_admin),
):
    """Department > class > teacher/student tree, with node counts per type."""
    root = await fetch_hierarchy(client)
    return ApiResponse.ok(root, metadata={"counts": count_by_type(root)})
