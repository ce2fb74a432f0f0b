"""Video catalogue schemas."""

from datetime import datetime

from pydantic import Field

from videovault.models import VerificationStatus

from .common import CamelModel
from .user import UserSummary


class VideoCreate(CamelModel):
    """Metadata for a video whose media is already hosted."""

    title: str = Field(..., description="Title shown in the catalogue")
    description: str | None = None
    video_url: str = Field(..., description="Where the media file is served from")


class ReviewerStatus(CamelModel):
    """One reviewer's verification request on a video."""

    id: str
    status: VerificationStatus
    created_at: datetime | None = None
    processed_at: datetime | None = None
    vip: UserSummary


class VideoResponse(CamelModel):
    """A video with its uploader and every reviewer's status."""

    id: str
    title: str
    description: str | None = None
    video_url: str
    view_count: int = 0
    created_at: datetime | None = None
    uploader: UserSummary
    verification_requests: list[ReviewerStatus] = Field(default_factory=list)


class CreatorStatsResponse(CamelModel):
    total_videos: int
    total_views: int
    verified_count: int
    pending_count: int
    rejected_count: int
