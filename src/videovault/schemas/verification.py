"""Schemas for verification requests and reviewer decisions."""

from datetime import datetime
from typing import Any

from pydantic import Field

from videovault.models import VerificationStatus

from .common import CamelModel
from .user import UserSummary


class DecisionRequest(CamelModel):
    """Body of a single reviewer decision."""

    auth_result: dict[str, Any] | None = Field(
        None,
        description="WebAuthn assertion JSON; not needed for ignore",
    )


class BatchDecisionRequest(CamelModel):
    """Body of a batch decision: one action and one assertion for every request."""

    request_ids: list[str] = Field(default_factory=list, description="Requests to decide")
    auth_result: dict[str, Any] | None = Field(
        None,
        description="WebAuthn assertion JSON shared by the whole batch",
    )


class BatchDecisionResponse(CamelModel):
    """Result of a batch decision."""

    success: bool = True
    processed: int = Field(..., description="Number of requests transitioned")
    request_ids: list[str] = Field(..., description="Requests transitioned, in request order")


class VerificationRequestResponse(CamelModel):
    """A verification request as stored."""

    id: str
    video_id: str
    vip_id: str
    status: VerificationStatus
    created_at: datetime | None = None
    processed_at: datetime | None = None


class VideoSummary(CamelModel):
    """Video details shown in a reviewer's queue."""

    id: str
    title: str
    description: str | None = None
    video_url: str
    uploader: UserSummary


class VerificationRequestDetail(VerificationRequestResponse):
    """A verification request with its video and uploader."""

    video: VideoSummary


class VerificationRequestCreate(CamelModel):
    """Creator's selection of reviewers for a video."""

    vip_ids: list[str] = Field(default_factory=list, description="Reviewers to ask")


class VerificationRequestCreated(CamelModel):
    """Number of new requests created."""

    success: bool = True
    requested: int
