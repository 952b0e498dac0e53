from typing import Any, Iterable, List, TypeVar

from leave_portal.models.leave_request import LeaveStatus

T = TypeVar("T")

STATUS_RANK = {
    LeaveStatus.PENDING: 1,
    LeaveStatus.APPROVED: 2,
    LeaveStatus.REJECTED: 3,
}
UNKNOWN_RANK = 99


def status_rank(status: Any) -> int:
    return STATUS_RANK.get(LeaveStatus.parse(status), UNKNOWN_RANK)


def sort_by_status(leaves: Iterable[T]) -> List[T]:
    """PENDING first, then APPROVED, then REJECTED, then anything else. Stable."""
    def _status(leave):
        return leave.get("status") if isinstance(leave, dict) else getattr(leave, "status", None)

    return sorted(leaves, key=lambda leave: status_rank(_status(leave)))
