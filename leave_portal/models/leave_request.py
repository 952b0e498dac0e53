import enum


class LeaveStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"

    @classmethod
    def parse(cls, value):
        """Returns the member whose value is exactly `value`, or None for anything else."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None

    @property
    def is_terminal(self) -> bool:
        return self is not LeaveStatus.PENDING


class LeaveAction(str, enum.Enum):
    """Actions accepted by POST /api/leaves/approve."""
    APPROVE = "APPROVE"
    REJECT = "REJECT"


class HistoryFilter(str, enum.Enum):
    ALL = "ALL"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
