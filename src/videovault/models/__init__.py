"""SQLAlchemy models for the VideoVault application."""

from .auth_request import AuthRequest, AuthRequestStatus
from .notification import Notification
from .passkey import Passkey
from .user import User, UserRole
from .verification import VerificationRequest, VerificationStatus
from .video import Video
from .web_session import WebSession

__all__ = [
    "AuthRequest", "AuthRequestStatus",
    "Notification",
    "Passkey",
    "User", "UserRole",
    "VerificationRequest", "VerificationStatus",
    "Video",
    "WebSession",
]
