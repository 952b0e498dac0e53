# Models package
# Importing modules here ensures they are registered with SQLAlchemy Base
from . import portal_state

# Explicit class exports for cleaner imports
from .portal_state import PortalState
from .leave_request import LeaveStatus, LeaveAction
from .user import UserRole

__all__ = [
    "PortalState",
    "LeaveStatus",
    "LeaveAction",
    "UserRole",
]
