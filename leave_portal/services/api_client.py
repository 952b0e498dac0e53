"""
Async client for the external leave-management REST API.

Every request is bounded by the configured timeout. Idempotent reads are
retried on transport failures; mutations are sent exactly once so a slow
POST can never be applied twice.
"""
import logging
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError
from tenacity import retry, stop_after_attempt, wait_fixed, retry_if_exception_type

from leave_portal.core.config import settings
from leave_portal.core.exceptions import UpstreamError, UpstreamUnavailableError
from leave_portal.services.notification import truncate_message

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

MASTER_DATA_RESOURCES = ("departments", "classes", "teachers", "students", "class-teachers")


def extract_error_message(response: httpx.Response, fallback: str) -> str:
    """The API puts the reason in `message` (sometimes `error`)."""
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict):
        return body.get("message") or body.get("error") or fallback
    return fallback


def parse_body(model: Type[M], body: Any, fallback: str) -> M:
    """Validate an upstream body. A malformed one is reported as a bad gateway."""
    try:
        return model.model_validate(body)
    except ValidationError as e:
        logger.warning(f"Malformed {model.__name__} from upstream: {e.error_count()} error(s)")
        raise UpstreamError(fallback, upstream_status=502)


class LeaveApiClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        token_provider: Optional[Callable[[], Optional[str]]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ):
        self._token_provider = token_provider or (lambda: None)
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.upstream.base_url,
            timeout=timeout or settings.upstream.timeout_seconds,
            transport=transport,
        )

    async def aclose(self):
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------
    def _headers(self) -> Dict[str, str]:
        token = self._token_provider()
        return {"Authorization": f"Bearer {token}"} if token else {}

    async def _send(self, method: str, path: str, fallback: str, json: Any = None) -> Any:
        try:
            response = await self._client.request(method, path, json=json, headers=self._headers())
        except httpx.TimeoutException:
            logger.error(f"{method} {path} timed out after {settings.upstream.timeout_seconds}s")
            raise UpstreamUnavailableError("Leave service timed out. Please try again.")
        except httpx.TransportError as e:
            logger.error(f"{method} {path} transport error: {e}")
            raise UpstreamUnavailableError()

        logger.info(f"Upstream {method} {path} -> {response.status_code}")
        if response.is_error:
            raw = extract_error_message(response, fallback)
            logger.warning(f"Upstream {method} {path} failed ({response.status_code}): {raw}")
            raise UpstreamError(truncate_message(raw), upstream_status=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            logger.warning(f"Upstream {method} {path} returned a non-JSON body")
            if method != "GET":
                # The write was accepted; only its echo is unreadable
                return None
            raise UpstreamError(fallback, upstream_status=response.status_code)

    @retry(
        stop=stop_after_attempt(settings.upstream.read_retry_attempts),
        wait=wait_fixed(settings.upstream.retry_wait_seconds),
        retry=retry_if_exception_type(UpstreamUnavailableError),
        reraise=True
    )
    async def _get(self, path: str, fallback: str) -> Any:
        return await self._send("GET", path, fallback)

    async def _mutate(self, method: str, path: str, fallback: str, json: Any = None) -> Any:
        return await self._send(method, path, fallback, json=json)

    # ------------------------------------------------------------------
    # Auth & settings
    # ------------------------------------------------------------------
    async def login(self, email: str, password: str) -> Dict[str, Any]:
        return await self._mutate("POST", "/api/auth/login", "Login failed", {"email": email, "password": password})

    async def register(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._mutate("POST", "/api/auth/register", "Registration failed", payload)

    async def update_password(self, current_password: str, new_password: str) -> Any:
        return await self._mutate(
            "PUT",
            "/api/auth/update-password",
            "Failed to update password",
            {"currentPassword": current_password, "newPassword": new_password},
        )

    async def get_settings(self) -> Dict[str, Any]:
        return await self._get("/api/settings", "Failed to fetch settings") or {}

    async def save_settings(self, ui_settings: Dict[str, Any]) -> Any:
        return await self._mutate("PUT", "/api/settings", "Failed to save settings", {"uiSettings": ui_settings})

    # ------------------------------------------------------------------
    # Leaves
    # ------------------------------------------------------------------
    async def apply_leave(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._mutate("POST", "/api/leaves/apply", "Failed to apply leave", payload)

    async def my_leaves(self) -> List[Dict[str, Any]]:
        return await self._get("/api/leaves/my-leaves", "Failed to load leaves") or []

    async def all_leaves(self) -> List[Dict[str, Any]]:
        return await self._get("/api/leaves/all", "Failed to load leaves") or []

    async def pending_leaves(self) -> List[Dict[str, Any]]:
        return await self._get("/api/leaves/pending", "Failed to load leaves") or []

    async def process_leave(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._mutate("POST", "/api/leaves/approve", "Failed to process leave", payload)

    # ------------------------------------------------------------------
    # Dashboard & hierarchy
    # ------------------------------------------------------------------
    async def dashboard_stats(self) -> Dict[str, Any]:
        return await self._get("/api/dashboard/stats", "Failed to load dashboard stats") or {}

    async def leave_statistics(self) -> Dict[str, Any]:
        return await self._get("/api/admin/leave-statistics", "Failed to load leave statistics") or {}

    async def hierarchy_tree(self) -> Dict[str, Any]:
        return await self._get("/api/hierarchy/tree", "Failed to load hierarchy")

    # ------------------------------------------------------------------
    # Admin master data
    # ------------------------------------------------------------------
    @staticmethod
    def _resource_path(resource: str) -> str:
        if resource not in MASTER_DATA_RESOURCES:
            raise ValueError(f"Unknown admin resource: {resource}")
        return f"/api/admin/{resource}"

    async def list_records(self, resource: str) -> List[Dict[str, Any]]:
        return await self._get(self._resource_path(resource), f"Failed to load {resource}") or []

    async def create_record(self, resource: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._mutate("POST", self._resource_path(resource), "Operation failed", payload)

    async def update_record(self, resource: str, record_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._mutate("PUT", f"{self._resource_path(resource)}/{record_id}", "Operation failed", payload)

    async def delete_record(self, resource: str, record_id: str) -> Any:
        return await self._mutate("DELETE", f"{self._resource_path(resource)}/{record_id}", "Delete failed")
