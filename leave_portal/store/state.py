"""
Application state container.

The state is a single `AppState` value. It only changes through
`Store.dispatch`, which runs the pure per-slice reducers below. The auth
and settings slices are persisted: the store hydrates them at startup and
writes every change through before `dispatch` returns.
"""
import logging
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional

from leave_portal.schemas.auth import AuthUser
from leave_portal.schemas.dashboard import DashboardStats
from leave_portal.schemas.leave import LeaveRecord
from leave_portal.schemas.settings import UISettings
from leave_portal.services.paginator import PaginationState
from leave_portal.store import actions as a
from leave_portal.store.persistence import StateRepository

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
USER_KEY = "user"
UI_SETTINGS_KEY = "ui_settings"


@dataclass(frozen=True)
class AuthState:
    user: Optional[AuthUser] = None
    token: Optional[str] = None
    loading: bool = False
    error: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)


@dataclass(frozen=True)
class LeaveState:
    # Last successful fetch per scope ("mine", "all"); replaced wholesale
    snapshots: Dict[str, List[LeaveRecord]] = field(default_factory=dict)
    loading: bool = False
    submitting: bool = False
    error: Optional[str] = None

    def leaves(self, scope: str) -> List[LeaveRecord]:
        return list(self.snapshots.get(scope, []))


@dataclass(frozen=True)
class DashboardState:
    stats: Optional[DashboardStats] = None
    loading: bool = False
    error: Optional[str] = None


@dataclass(frozen=True)
class SettingsState:
    ui_settings: UISettings = field(default_factory=UISettings)
    loading: bool = False
    error: Optional[str] = None


@dataclass(frozen=True)
class AppState:
    auth: AuthState = field(default_factory=AuthState)
    leave: LeaveState = field(default_factory=LeaveState)
    dashboard: DashboardState = field(default_factory=DashboardState)
    settings: SettingsState = field(default_factory=SettingsState)


# ============================================================================
# REDUCERS
# ============================================================================
def auth_reducer(state: AuthState, action) -> AuthState:
    if isinstance(action, a.LoginPending):
        return replace(state, loading=True, error=None)
    if isinstance(action, a.LoginFulfilled):
        return AuthState(user=action.user, token=action.token)
    if isinstance(action, a.LoginRejected):
        return replace(state, loading=False, error=action.error)
    if isinstance(action, a.Logout):
        return AuthState()
    if isinstance(action, a.ClearAuthError):
        return replace(state, error=None)
    return state


def leave_reducer(state: LeaveState, action) -> LeaveState:
    if isinstance(action, a.LeavesPending):
        return replace(state, loading=True, error=None)
    if isinstance(action, a.LeavesFulfilled):
        snapshots = dict(state.snapshots)
        snapshots[action.scope] = list(action.leaves)
        return replace(state, snapshots=snapshots, loading=False, error=None)
    if isinstance(action, a.LeavesRejected):
        return replace(state, loading=False, error=action.error)
    if isinstance(action, a.SubmitStarted):
        return replace(state, submitting=True, error=None)
    if isinstance(action, a.SubmitFinished):
        return replace(state, submitting=False, error=action.error)
    if isinstance(action, a.ClearLeaves):
        return LeaveState()
    return state


def dashboard_reducer(state: DashboardState, action) -> DashboardState:
    if isinstance(action, a.StatsPending):
        return replace(state, loading=True, error=None)
    if isinstance(action, a.StatsFulfilled):
        return DashboardState(stats=action.stats)
    if isinstance(action, a.StatsRejected):
        return replace(state, loading=False, error=action.error)
    if isinstance(action, a.ClearStats):
        return DashboardState()
    return state


def settings_reducer(state: SettingsState, action) -> SettingsState:
    ui = state.ui_settings
    if isinstance(action, a.SetTheme):
        return replace(state, ui_settings=ui.model_copy(update={"theme": action.theme}))
    if isinstance(action, a.SetToastPosition):
        return replace(state, ui_settings=ui.model_copy(update={"toast_position": action.position}))
    if isinstance(action, a.SetToastDuration):
        return replace(state, ui_settings=ui.model_copy(update={"toast_duration": action.duration_ms}))
    if isinstance(action, a.SettingsPending):
        return replace(state, loading=True, error=None)
    if isinstance(action, a.SettingsFulfilled):
        return SettingsState(ui_settings=action.ui_settings)
    if isinstance(action, a.SettingsRejected):
        return replace(state, loading=False, error=action.error)
    return state


def root_reducer(state: AppState, action) -> AppState:
    return AppState(
        auth=auth_reducer(state.auth, action),
        leave=leave_reducer(state.leave, action),
        dashboard=dashboard_reducer(state.dashboard, action),
        settings=settings_reducer(state.settings, action),
    )


# ============================================================================
# STORE
# ============================================================================
class Store:
    def __init__(self, repository: StateRepository):
        self.repository = repository
        self.state = AppState()
        # Pagination cursors of open list views; never persisted
        self._views: Dict[str, PaginationState] = {}

    def hydrate(self) -> None:
        """Loads the persisted auth and settings slices."""
        token = self.repository.load(TOKEN_KEY)
        user_data = self.repository.load(USER_KEY)
        ui_data = self.repository.load(UI_SETTINGS_KEY)

        user = None
        if user_data:
            try:
                user = AuthUser.model_validate(user_data)
            except ValueError:
                logger.error("Failed to parse stored user; ignoring it")

        ui_settings = UISettings()
        if ui_data:
            try:
                ui_settings = UISettings.model_validate(ui_data)
            except ValueError:
                logger.error("Failed to parse stored UI settings; using defaults")

        self.state = replace(
            self.state,
            auth=AuthState(user=user, token=token),
            settings=SettingsState(ui_settings=ui_settings),
        )
        logger.info(f"State hydrated (authenticated={self.state.auth.is_authenticated}, theme={ui_settings.theme})")

    def dispatch(self, action) -> AppState:
        previous = self.state
        self.state = root_reducer(previous, action)
        self._write_through(previous, self.state)
        return self.state

    def _write_through(self, before: AppState, after: AppState) -> None:
        if before.auth.token != after.auth.token:
            if after.auth.token:
                self.repository.save(TOKEN_KEY, after.auth.token, encrypt=True)
            else:
                self.repository.delete(TOKEN_KEY)
        if before.auth.user != after.auth.user:
            if after.auth.user:
                self.repository.save(USER_KEY, after.auth.user.model_dump(mode="json", by_alias=True))
            else:
                self.repository.delete(USER_KEY)
        if before.settings.ui_settings != after.settings.ui_settings:
            self.repository.save(UI_SETTINGS_KEY, after.settings.ui_settings.model_dump(mode="json", by_alias=True))

    # --- convenience accessors ---
    def token(self) -> Optional[str]:
        return self.state.auth.token

    @property
    def user(self) -> Optional[AuthUser]:
        return self.state.auth.user

    @property
    def ui_settings(self) -> UISettings:
        return self.state.settings.ui_settings

    def view(self, name: str) -> PaginationState:
        if name not in self._views:
            self._views[name] = PaginationState()
        return self._views[name]

    def close_view(self, name: str) -> bool:
        return self._views.pop(name, None) is not None

    def clear_views(self) -> None:
        self._views.clear()
