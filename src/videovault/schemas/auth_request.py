"""Schemas for creator authorization requests."""

from datetime import datetime

from videovault.models import AuthRequestStatus

from .common import CamelModel
from .user import UserSummary


class AuthRequestResponse(CamelModel):
    """A creator's request for auth-approved standing."""

    id: str
    creator_id: str
    status: AuthRequestStatus
    created_at: datetime | None = None
    processed_at: datetime | None = None


class AuthRequestWithCreator(AuthRequestResponse):
    """Authorization request with the requesting creator attached."""

    creator: UserSummary
