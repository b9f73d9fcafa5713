"""Pydantic DTOs for accounts: signup, login, password reset and staff."""

from datetime import datetime

from pydantic import BaseModel, Field

from atelier.domain.entities import UserRole


class SignupRequest(BaseModel):
    """Schema for a client registering on the portal."""

    name: str = Field(..., max_length=255, examples=["Ada Obi"])
    email: str = Field(..., max_length=320, examples=["ada@example.com"])
    password: str = Field(..., max_length=255)
    phone: str = Field("", max_length=50)
    company: str | None = Field(None, max_length=255)


class StaffCreateRequest(SignupRequest):
    """Schema for a superadmin onboarding a staff member."""

    role: UserRole = UserRole.WORKER


class LoginRequest(BaseModel):
    """Credentials plus the role group the user is signing in as.

    ``role_group`` is ``admin`` for the staff console or a literal role.
    """

    email: str
    password: str
    role_group: str = Field("client", examples=["client", "admin"])


class ResetPasswordRequest(BaseModel):
    email: str
    new_password: str


class UserResponse(BaseModel):
    """Account representation returned by the API; never includes the credential."""

    id: str
    name: str
    email: str
    phone: str
    role: UserRole
    company: str | None
    project_ids: list[str]
    created_at: datetime

    model_config = {"from_attributes": True}
