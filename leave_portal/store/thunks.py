"""
Async operations that talk to the leave API and record their progress in
the store as pending / fulfilled / rejected actions.
"""
import logging

from leave_portal.core.exceptions import AppException
from leave_portal.schemas.auth import LoginResult
from leave_portal.schemas.dashboard import DashboardStats
from leave_portal.schemas.settings import UISettings
from leave_portal.services.api_client import LeaveApiClient, parse_body
from leave_portal.services.dashboard_aggregator import DashboardAggregator
from leave_portal.store import actions as a
from leave_portal.store.state import Store

logger = logging.getLogger(__name__)


async def login(store: Store, client: LeaveApiClient, email: str, password: str) -> LoginResult:
    store.dispatch(a.LoginPending())
    try:
        result = parse_body(LoginResult, await client.login(email, password), "Login failed")
    except AppException as e:
        store.dispatch(a.LoginRejected(error=e.message))
        raise
    store.dispatch(a.LoginFulfilled(user=result.user(), token=result.access_token))
    logger.info(f"Signed in as {result.email} ({result.role.value})")
    return result


def logout(store: Store) -> None:
    store.dispatch(a.Logout())
    store.dispatch(a.ClearLeaves())
    store.dispatch(a.ClearStats())
    store.clear_views()


async def fetch_dashboard_stats(store: Store, aggregator: DashboardAggregator) -> DashboardStats:
    store.dispatch(a.StatsPending())
    try:
        stats = await aggregator.fetch(store.user.role)
    except AppException as e:
        store.dispatch(a.StatsRejected(error=e.message))
        raise
    store.dispatch(a.StatsFulfilled(stats=stats))
    return stats


async def fetch_settings(store: Store, client: LeaveApiClient) -> UISettings:
    """Merges the server copy of the UI settings over the local one."""
    store.dispatch(a.SettingsPending())
    try:
        body = await client.get_settings()
        remote = body.get("uiSettings") if isinstance(body, dict) else None
        if not isinstance(remote, dict):
            remote = {}
        merged = parse_body(
            UISettings,
            {**store.ui_settings.model_dump(by_alias=True), **remote},
            "Failed to fetch settings",
        )
    except AppException as e:
        store.dispatch(a.SettingsRejected(error=e.message))
        raise
    store.dispatch(a.SettingsFulfilled(ui_settings=merged))
    return merged


async def save_settings(store: Store, client: LeaveApiClient, ui_settings: UISettings) -> UISettings:
    """Saves to the server first; the local copy changes only if that succeeds."""
    store.dispatch(a.SettingsPending())
    try:
        await client.save_settings(ui_settings.model_dump(mode="json", by_alias=True))
    except AppException as e:
        store.dispatch(a.SettingsRejected(error=e.message))
        raise
    store.dispatch(a.SettingsFulfilled(ui_settings=ui_settings))
    return ui_settings
