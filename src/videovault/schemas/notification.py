"""Notification schemas."""

from datetime import datetime

from .common import CamelModel


class NotificationResponse(CamelModel):
    """A stored notification."""

    id: str
    user_id: str
    type: str
    title: str
    message: str
    link: str | None = None
    read: bool = False
    created_at: datetime | None = None


class UnreadCountResponse(CamelModel):
    """Number of unread notifications."""

    count: int
