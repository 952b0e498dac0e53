import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Tuple

from leave_portal.core.exceptions import AppException, UpstreamError
from leave_portal.models.user import UserRole
from leave_portal.schemas.dashboard import DashboardStats, LeaveStats
from leave_portal.services.api_client import LeaveApiClient, parse_body

logger = logging.getLogger(__name__)

# metric name -> admin collection whose length is the count
ADMIN_COUNT_SOURCES = {
    "departments": "departments",
    "classes": "classes",
    "teachers": "teachers",
    "students": "students",
    "class_teachers": "class-teachers",
}


class DashboardAggregator:
    """
    Fetches the dashboard's independent reads concurrently and merges them.

    Every read is isolated: a failure is logged, its metrics fall back to
    zero, and the sibling reads carry on. `loading` stays True until all
    of them have settled.
    """

    def __init__(self, client: LeaveApiClient):
        self.client = client
        self.loading = False
        self.failed_metrics: List[str] = []

    def _record_failure(self, name: str, error: Exception) -> None:
        self.failed_metrics.append(name)
        if isinstance(error, AppException):
            logger.warning(f"Dashboard metric '{name}' unavailable: {error.message}")
        else:
            logger.error(f"Dashboard metric '{name}' failed unexpectedly: {error!r}")

    async def _gather(self, reads: Dict[str, Tuple[Callable[[], Awaitable[Any]], Any]]) -> Dict[str, Any]:
        self.loading = True
        self.failed_metrics = []
        try:
            results = await asyncio.gather(
                *(read() for read, _ in reads.values()), return_exceptions=True
            )
        finally:
            self.loading = False

        merged = {}
        for (name, (_, default)), result in zip(reads.items(), results):
            if isinstance(result, Exception):
                self._record_failure(name, result)
                merged[name] = default
            else:
                merged[name] = result
        return merged

    async def _count(self, resource: str) -> int:
        records = await self.client.list_records(resource)
        if records is None:
            return 0
        if not isinstance(records, list):
            raise UpstreamError(f"Failed to load {resource}", upstream_status=502)
        return len(records)

    @staticmethod
    async def _leave_counts(read: Callable[[], Awaitable[Any]]) -> LeaveStats:
        return parse_body(LeaveStats, await read() or {}, "Failed to load leave statistics")

    async def admin_stats(self) -> DashboardStats:
        reads = {
            metric: (lambda resource=resource: self._count(resource), 0)
            for metric, resource in ADMIN_COUNT_SOURCES.items()
        }
        reads["leaves"] = (lambda: self._leave_counts(self.client.leave_statistics), LeaveStats())
        results = await self._gather(reads)

        counts = {metric: results[metric] for metric in ADMIN_COUNT_SOURCES}
        return DashboardStats(**counts, **results["leaves"].model_dump())

    async def leave_stats(self) -> DashboardStats:
        results = await self._gather(
            {"leaves": (lambda: self._leave_counts(self.client.dashboard_stats), LeaveStats())}
        )
        return DashboardStats(**results["leaves"].model_dump())

    async def fetch(self, role: UserRole) -> DashboardStats:
        if role == UserRole.ADMIN:
            return await self.admin_stats()
        return await self.leave_stats()


async def profile_leave_stats(client: LeaveApiClient) -> LeaveStats:
    """Optional profile widget: any failure renders empty counts, no error shown."""
    try:
        return parse_body(LeaveStats, await client.dashboard_stats() or {}, "Failed to load dashboard stats")
    except AppException as e:
        logger.debug(f"Profile stats unavailable: {e.message}")
        return LeaveStats()
