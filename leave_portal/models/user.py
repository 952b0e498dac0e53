import enum


class UserRole(str, enum.Enum):
    """
    Portal roles.

    - STUDENT: applies for leave, sees own leaves
    - TEACHER: approves / rejects leaves reported to them, may apply too
    - ADMIN: manages master data (departments, classes, staff, students)
    """
    STUDENT = "STUDENT"
    TEACHER = "TEACHER"
    ADMIN = "ADMIN"
