"""Version 1 API endpoints."""

from .endpoints import (
    auth_requests_router,
    auth_router,
    notifications_router,
    users_router,
    videos_router,
    vip_router,
    webauthn_router,
)

__all__ = [
    "auth_router",
    "auth_requests_router",
    "notifications_router",
    "users_router",
    "videos_router",
    "vip_router",
    "webauthn_router",
]
