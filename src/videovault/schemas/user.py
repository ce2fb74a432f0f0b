"""User-related Pydantic schemas."""

from pydantic import Field

from videovault.models import UserRole

from .common import CamelModel


class UserSummary(CamelModel):
    """Public view of an account; never includes credentials."""

    id: str
    username: str
    role: UserRole
    display_name: str | None = Field(None, description="Name shown in the UI")
    title: str | None = None
    country: str | None = None
    avatar_url: str | None = None
    is_auth_approved: bool = False


class AdminUserResponse(UserSummary):
    """Account as listed to administrators."""

    has_requested_auth: bool = False
