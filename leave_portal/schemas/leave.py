from pydantic import computed_field, field_validator
from datetime import date, datetime
from typing import Optional, Union

from leave_portal.models.leave_request import LeaveAction, LeaveStatus
from leave_portal.schemas.base import CamelModel


def inclusive_days(from_date: Optional[date], to_date: Optional[date]) -> int:
    """Number of calendar days covered, counting both endpoints. 0 for an inverted or open range."""
    if not from_date or not to_date:
        return 0
    diff = (to_date - from_date).days
    return diff + 1 if diff >= 0 else 0


class LeaveRecord(CamelModel):
    """A leave request as returned by the leave API."""
    leave_id: str
    applicant_id: Optional[str] = None
    applicant_name: Optional[str] = None
    applicant_role: Optional[str] = None
    class_name: Optional[str] = None
    department_name: Optional[str] = None
    from_date: Optional[date] = None
    to_date: Optional[date] = None
    subject: Optional[str] = None
    reason: Optional[str] = None
    # Unknown server statuses are kept verbatim so they still sort (last)
    status: Union[LeaveStatus, str] = LeaveStatus.PENDING
    rejection_reason: Optional[str] = None
    reported_to_name: Optional[str] = None
    approved_by_name: Optional[str] = None
    rejected_by_name: Optional[str] = None
    applied_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    rejected_at: Optional[datetime] = None

    @field_validator("status", mode="after")
    @classmethod
    def _closed_status(cls, v):
        return LeaveStatus.parse(v) or v

    @computed_field(alias="totalDays")
    @property
    def total_days(self) -> int:
        return inclusive_days(self.from_date, self.to_date)

    @property
    def lifecycle_status(self) -> Optional[LeaveStatus]:
        return self.status if isinstance(self.status, LeaveStatus) else None


class LeaveApplication(CamelModel):
    """Body of POST /api/leaves/apply."""
    from_date: date
    to_date: date
    subject: str
    reason: str


class LeaveApplyForm(CamelModel):
    """Portal form; everything optional so the workflow can report what is missing."""
    from_date: Optional[date] = None
    to_date: Optional[date] = None
    subject: str = ""
    reason: str = ""


class LeaveApproval(CamelModel):
    """Body of POST /api/leaves/approve."""
    leave_id: str
    action: LeaveAction
    rejection_reason: str = ""


class RejectForm(CamelModel):
    rejection_reason: str = ""
