from pydantic import Field
from typing import Optional

from leave_portal.models.user import UserRole
from leave_portal.schemas.base import CamelModel


class AuthUser(CamelModel):
    user_id: str
    name: str
    email: str
    role: UserRole


class LoginRequest(CamelModel):
    email: str
    password: str


class LoginResult(CamelModel):
    """Shape of POST /api/auth/login."""
    access_token: str
    role: UserRole
    user_id: str
    name: str
    email: str

    def user(self) -> AuthUser:
        return AuthUser(user_id=self.user_id, name=self.name, email=self.email, role=self.role)


class RegistrationRequest(CamelModel):
    name: str
    email: str
    password: str
    confirm_password: str
    role: UserRole = UserRole.STUDENT
    department_id: Optional[str] = None
    class_id: Optional[str] = None


class PasswordUpdate(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: str
    confirm_password: str
