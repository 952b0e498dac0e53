from fastapi import APIRouter, Depends

from leave_portal.core.schemas import ApiResponse
from leave_portal.schemas.settings import UISettings, UISettingsUpdate
from leave_portal.services.api_client import LeaveApiClient
from leave_portal.services.notification import NotificationService
from leave_portal.store import actions as a
from leave_portal.store import thunks
from leave_portal.store.state import Store
from leave_portal.routers.deps import get_api_client, get_current_user, get_store

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=UISettings)
def get_settings(store: Store = Depends(get_store)):
    return store.ui_settings


@router.patch("", response_model=UISettings)
def update_local_settings(update: UISettingsUpdate, store: Store = Depends(get_store)):
    """Applies immediately and persists locally; nothing is sent to the server."""
    if update.theme is not None:
        store.dispatch(a.SetTheme(theme=update.theme))
    if update.toast_position is not None:
        store.dispatch(a.SetToastPosition(position=update.toast_position))
    if update.toast_duration is not None:
        store.dispatch(a.SetToastDuration(duration_ms=update.toast_duration))
    return store.ui_settings


@router.put("", response_model=ApiResponse[UISettings])
async def save_settings(
    ui_settings: UISettings,
    store: Store = Depends(get_store),
    client: LeaveApiClient = Depends(get_api_client),
    user=Depends(get_current_user),
):
    saved = await thunks.save_settings(store, client, ui_settings)
    # Toast with the settings just saved
    return ApiResponse.ok(saved, toast=NotificationService(saved).success("Settings saved successfully!"))


@router.post("/sync", response_model=UISettings)
async def sync_settings(
    store: Store = Depends(get_store),
    client: LeaveApiClient = Depends(get_api_client),
    user=Depends(get_current_user),
):
    return await thunks.fetch_settings(store, client)
