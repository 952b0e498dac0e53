"""
Request dependencies: the session store, an upstream client bound to the
signed-in user's token, and role guards.
"""
import logging
from typing import AsyncIterator, Callable, List

from fastapi import Depends, Request

from leave_portal.core.exceptions import AccessDeniedError, AuthenticationError
from leave_portal.models.user import UserRole
from leave_portal.schemas.auth import AuthUser
from leave_portal.services.api_client import LeaveApiClient
from leave_portal.services.notification import NotificationService
from leave_portal.store.state import Store

logger = logging.getLogger(__name__)


def get_store(request: Request) -> Store:
    return request.app.state.store


async def get_api_client(store: Store = Depends(get_store)) -> AsyncIterator[LeaveApiClient]:
    """One upstream client per request; the token is read at send time."""
    async with LeaveApiClient(token_provider=store.token) as client:
        yield client


def get_notifier(store: Store = Depends(get_store)) -> NotificationService:
    return NotificationService(store.ui_settings)


def get_current_user(store: Store = Depends(get_store)) -> AuthUser:
    auth = store.state.auth
    if not auth.is_authenticated or auth.user is None:
        logger.info("Rejected request: no signed-in user")
        raise AuthenticationError()
    return auth.user


def require_role(allowed_roles: List[UserRole]) -> Callable:
    """
    Mirrors the protected-route guard of the portal. The leave API still
    makes the final authorization decision.
    """
    def role_checker(user: AuthUser = Depends(get_current_user)) -> AuthUser:
        if user.role not in allowed_roles:
            logger.warning(f"Access denied for role {user.role.value}")
            raise AccessDeniedError(
                f"This page requires one of: {', '.join(r.value for r in allowed_roles)}"
            )
        return user
    return role_checker


require_approver = require_role([UserRole.TEACHER, UserRole.ADMIN])
require_admin = require_role([UserRole.ADMIN])
