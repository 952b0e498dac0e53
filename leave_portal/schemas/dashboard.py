from pydantic import field_validator

from leave_portal.schemas.base import CamelModel


class _Counts(CamelModel):
    @field_validator("*", mode="before")
    @classmethod
    def _missing_is_zero(cls, v):
        return 0 if v is None else v


class DashboardStats(_Counts):
    departments: int = 0
    classes: int = 0
    teachers: int = 0
    students: int = 0
    class_teachers: int = 0
    total_leaves: int = 0
    pending_leaves: int = 0
    approved_leaves: int = 0
    rejected_leaves: int = 0


class LeaveStats(_Counts):
    """Counts returned by /api/dashboard/stats and /api/admin/leave-statistics."""
    total_leaves: int = 0
    pending_leaves: int = 0
    approved_leaves: int = 0
    rejected_leaves: int = 0
