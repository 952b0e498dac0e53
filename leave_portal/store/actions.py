"""Actions accepted by Store.dispatch. One dataclass per state transition."""
from dataclasses import dataclass
from typing import List, Optional

from leave_portal.schemas.auth import AuthUser
from leave_portal.schemas.dashboard import DashboardStats
from leave_portal.schemas.leave import LeaveRecord
from leave_portal.schemas.settings import UISettings


# --- auth ---
@dataclass(frozen=True)
class LoginPending:
    pass


@dataclass(frozen=True)
class LoginFulfilled:
    user: AuthUser
    token: str


@dataclass(frozen=True)
class LoginRejected:
    error: str


@dataclass(frozen=True)
class Logout:
    pass


@dataclass(frozen=True)
class ClearAuthError:
    pass


# --- leave ---
@dataclass(frozen=True)
class LeavesPending:
    scope: str


@dataclass(frozen=True)
class LeavesFulfilled:
    scope: str
    leaves: List[LeaveRecord]


@dataclass(frozen=True)
class LeavesRejected:
    scope: str
    error: str


@dataclass(frozen=True)
class SubmitStarted:
    pass


@dataclass(frozen=True)
class SubmitFinished:
    error: Optional[str] = None


@dataclass(frozen=True)
class ClearLeaves:
    pass


# --- dashboard ---
@dataclass(frozen=True)
class StatsPending:
    pass


@dataclass(frozen=True)
class StatsFulfilled:
    stats: DashboardStats


@dataclass(frozen=True)
class StatsRejected:
    error: str


@dataclass(frozen=True)
class ClearStats:
    pass


# --- settings ---
@dataclass(frozen=True)
class SetTheme:
    theme: str


@dataclass(frozen=True)
class SetToastPosition:
    position: str


@dataclass(frozen=True)
class SetToastDuration:
    duration_ms: int


@dataclass(frozen=True)
class SettingsPending:
    pass


@dataclass(frozen=True)
class SettingsFulfilled:
    ui_settings: UISettings


@dataclass(frozen=True)
class SettingsRejected:
    error: str
