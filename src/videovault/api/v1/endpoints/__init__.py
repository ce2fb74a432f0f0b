"""API endpoint modules for version 1."""

from .auth import router as auth_router
from .auth_requests import router as auth_requests_router
from .notifications import router as notifications_router
from .users import router as users_router
from .videos import router as videos_router
from .vip import router as vip_router
from .webauthn import router as webauthn_router

__all__ = [
    "auth_router",
    "auth_requests_router",
    "notifications_router",
    "users_router",
    "videos_router",
    "vip_router",
    "webauthn_router",
]
