"""Video catalogue endpoints and creator requests for VIP attestation."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from videovault.api.v1.dependencies import (
    CreatorContextDep,
    NotificationHubDep,
    SessionContextDep,
    SessionDep,
)
from videovault.api.v1.errors import service_errors
from videovault.schemas import (
    CreatorStatsResponse,
    VerificationRequestCreate,
    VerificationRequestCreated,
    VideoCreate,
    VideoResponse,
)
from videovault.services import videos as video_service
from videovault.services.verification_requests import request_verification

router = APIRouter(tags=["videos"])


@router.get("/videos", response_model=list[VideoResponse])
async def list_videos(
    db: SessionDep,
    search: str | None = Query(None, description="Match against title or description"),
) -> list[VideoResponse]:
    """Public catalogue, newest first."""
    with service_errors(db, "video listing"):
        videos = video_service.list_videos(db, search)
        return [VideoResponse.model_validate(video) for video in videos]


@router.post("/videos", response_model=VideoResponse, status_code=status.HTTP_201_CREATED)
async def create_video(
    payload: VideoCreate,
    context: SessionContextDep,
    db: SessionDep,
) -> VideoResponse:
    """Add a video record pointing at already hosted media."""
    with service_errors(db, "video creation"):
        video = video_service.create_video(
            db,
            context.user,
            title=payload.title,
            description=payload.description,
            video_url=payload.video_url,
        )
        return VideoResponse.model_validate(video)


@router.get("/videos/{video_id}", response_model=VideoResponse)
async def get_video(video_id: str, db: SessionDep) -> VideoResponse:
    """Return a video with each reviewer's status, counting one view."""
    with service_errors(db, "video lookup"):
        video_service.get_video(db, video_id)
        video_service.record_view(db, video_id)
        return VideoResponse.model_validate(video_service.get_video(db, video_id))


@router.get("/my-videos", response_model=list[VideoResponse])
async def list_my_videos(context: SessionContextDep, db: SessionDep) -> list[VideoResponse]:
    with service_errors(db, "video listing"):
        videos = video_service.videos_by_uploader(db, context.user.id)
        return [VideoResponse.model_validate(video) for video in videos]


@router.get("/my-stats", response_model=CreatorStatsResponse)
async def get_my_stats(context: SessionContextDep, db: SessionDep) -> CreatorStatsResponse:
    with service_errors(db, "creator stats"):
        stats = video_service.creator_stats(db, context.user.id)
    return CreatorStatsResponse.model_validate(stats)


@router.post("/videos/{video_id}/verification-requests", response_model=VerificationRequestCreated)
async def create_verification_requests(
    video_id: str,
    payload: VerificationRequestCreate,
    context: CreatorContextDep,
    db: SessionDep,
    hub: NotificationHubDep,
) -> VerificationRequestCreated:
    """Ask the selected VIPs to verify one of the caller's videos.

    Reviewers already asked about this video are skipped silently.
    """
    with service_errors(db, "verification request creation"):
        created = request_verification(
            db,
            hub,
            creator=context.user,
            video_id=video_id,
            vip_ids=payload.vip_ids,
        )
    return VerificationRequestCreated(requested=len(created))
