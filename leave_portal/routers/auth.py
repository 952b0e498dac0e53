import logging

from fastapi import APIRouter, Depends

from leave_portal.core.exceptions import FormValidationError
from leave_portal.core.schemas import ApiResponse
from leave_portal.schemas.auth import AuthUser, LoginRequest, PasswordUpdate, RegistrationRequest
from leave_portal.services.api_client import LeaveApiClient
from leave_portal.services.notification import NotificationService
from leave_portal.store import thunks
from leave_portal.store.state import Store
from leave_portal.routers.deps import get_api_client, get_current_user, get_notifier, get_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

MIN_PASSWORD_LENGTH = 6


def _check_new_password(password: str, confirmation: str) -> None:
    if password != confirmation:
        raise FormValidationError("Passwords do not match", field="confirmPassword")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise FormValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long", field="password"
        )


@router.post("/login", response_model=ApiResponse[AuthUser])
async def login(
    credentials: LoginRequest,
    store: Store = Depends(get_store),
    client: LeaveApiClient = Depends(get_api_client),
    notifier: NotificationService = Depends(get_notifier),
):
    result = await thunks.login(store, client, credentials.email, credentials.password)
    return ApiResponse.ok(result.user(), toast=notifier.success("Login successful!"))


@router.post("/register", response_model=ApiResponse[dict])
async def register(
    form: RegistrationRequest,
    client: LeaveApiClient = Depends(get_api_client),
    notifier: NotificationService = Depends(get_notifier),
):
    _check_new_password(form.password, form.confirm_password)
    payload = form.model_dump(mode="json", by_alias=True, exclude_none=True, exclude={"confirm_password"})
    created = await client.register(payload)
    return ApiResponse.ok(created or {}, toast=notifier.success("Registration successful! Please login."))


@router.post("/logout", response_model=ApiResponse[dict])
def logout(
    store: Store = Depends(get_store),
    notifier: NotificationService = Depends(get_notifier),
):
    thunks.logout(store)
    return ApiResponse.ok({}, toast=notifier.info("Logged out successfully"))


@router.get("/me", response_model=AuthUser)
def me(user: AuthUser = Depends(get_current_user)):
    return user


@router.put("/password", response_model=ApiResponse[dict])
async def update_password(
    form: PasswordUpdate,
    client: LeaveApiClient = Depends(get_api_client),
    notifier: NotificationService = Depends(get_notifier),
    user: AuthUser = Depends(get_current_user),
):
    _check_new_password(form.new_password, form.confirm_password)
    await client.update_password(form.current_password, form.new_password)
    return ApiResponse.ok({}, toast=notifier.success("Password updated successfully"))
