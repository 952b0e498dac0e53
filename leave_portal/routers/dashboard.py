from fastapi import APIRouter, Depends

from leave_portal.core.schemas import ApiResponse
from leave_portal.schemas.auth import AuthUser
from leave_portal.schemas.dashboard import DashboardStats, LeaveStats
from leave_portal.services.api_client import LeaveApiClient
from leave_portal.services.dashboard_aggregator import DashboardAggregator, profile_leave_stats
from leave_portal.store import thunks
from leave_portal.store.state import Store
from leave_portal.routers.deps import get_api_client, get_current_user, get_store

router = APIRouter(tags=["dashboard"])


@router.get("/dashboard", response_model=ApiResponse[DashboardStats])
async def dashboard(
    store: Store = Depends(get_store),
    client: LeaveApiClient = Depends(get_api_client),
    user: AuthUser = Depends(get_current_user),
):
    """Role-specific counts. Metrics that could not be fetched are listed and shown as 0."""
    aggregator = DashboardAggregator(client)
    stats = await thunks.fetch_dashboard_stats(store, aggregator)
    return ApiResponse.ok(stats, metadata={"failed_metrics": aggregator.failed_metrics})


@router.get("/profile/stats", response_model=LeaveStats)
async def profile_stats(
    client: LeaveApiClient = Depends(get_api_client),
    user: AuthUser = Depends(get_current_user),
):
    return await profile_leave_stats(client)
