"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .auth_request import AuthRequestResponse, AuthRequestWithCreator
from .common import CamelModel, SuccessResponse
from .notification import NotificationResponse, UnreadCountResponse
from .user import AdminUserResponse, UserSummary
from .verification import (
    BatchDecisionRequest,
    BatchDecisionResponse,
    DecisionRequest,
    VerificationRequestCreate,
    VerificationRequestCreated,
    VerificationRequestDetail,
    VerificationRequestResponse,
    VideoSummary,
)
from .video import CreatorStatsResponse, ReviewerStatus, VideoCreate, VideoResponse
from .webauthn import HasPasskeyResponse

__all__ = [
    "AuthRequestResponse", "AuthRequestWithCreator",
    "CamelModel", "SuccessResponse",
    "NotificationResponse", "UnreadCountResponse",
    "AdminUserResponse", "UserSummary",
    "BatchDecisionRequest", "BatchDecisionResponse", "DecisionRequest",
    "VerificationRequestCreate", "VerificationRequestCreated",
    "VerificationRequestDetail", "VerificationRequestResponse", "VideoSummary",
    "CreatorStatsResponse", "ReviewerStatus", "VideoCreate", "VideoResponse",
    "HasPasskeyResponse",
]
