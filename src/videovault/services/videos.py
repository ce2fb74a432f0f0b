"""Video catalogue: metadata records, view counts and creator statistics.

Only metadata is stored here. The media file is hosted elsewhere and a video
row just points at it through ``video_url``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import or_, select, update
from sqlalchemy.orm import Session, selectinload

from videovault.models import User, UserRole, VerificationRequest, VerificationStatus, Video
from videovault.services.errors import InvalidVideoError, NotFoundError, PermissionDeniedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CreatorStats:
    """Totals shown on a creator's dashboard.

    Each video is counted once under its best outcome: verified if any
    reviewer verified it, else rejected, else pending.
    """

    total_videos: int
    total_views: int
    verified_count: int
    pending_count: int
    rejected_count: int


def _with_details():
    return (
        select(Video)
        .options(
            selectinload(Video.uploader),
            selectinload(Video.verification_requests).selectinload(VerificationRequest.vip),
        )
        .order_by(Video.created_at.desc())
    )


def list_videos(db: Session, search: str | None = None) -> list[Video]:
    """Return all videos, newest first, optionally filtered by title or description."""
    query = _with_details()
    if search:
        pattern = f"%{search}%"
        query = query.where(or_(Video.title.ilike(pattern), Video.description.ilike(pattern)))
    return list(db.execute(query).scalars())


def videos_by_uploader(db: Session, uploader_id: str) -> list[Video]:
    return list(db.execute(_with_details().where(Video.uploader_id == uploader_id)).scalars())


def get_video(db: Session, video_id: str) -> Video:
    """Return one video with its uploader and every reviewer's status.

    Raises:
        NotFoundError: The video does not exist.
    """
    video = db.execute(_with_details().where(Video.id == video_id)).scalars().first()
    if video is None:
        raise NotFoundError("Video not found")
    return video


def record_view(db: Session, video_id: str) -> None:
    """Count one view of a video."""
    db.execute(
        update(Video).where(Video.id == video_id).values(view_count=Video.view_count + 1)
    )
    db.commit()


def create_video(
    db: Session,
    uploader: User,
    *,
    title: str,
    video_url: str,
    description: str | None = None,
) -> Video:
    """Register a video hosted at ``video_url``.

    Raises:
        PermissionDeniedError: The uploader is a VIP reviewer.
        InvalidVideoError: The title or URL is blank.
    """
    if uploader.role is UserRole.VIP:
        raise PermissionDeniedError("VIPs cannot upload videos")
    if not title.strip():
        raise InvalidVideoError("Title is required")
    if not video_url.strip():
        raise InvalidVideoError("Video URL is required")

    video = Video(
        title=title.strip(),
        description=description or None,
        video_url=video_url.strip(),
        uploader_id=uploader.id,
    )
    db.add(video)
    db.commit()
    logger.info("User %s added video %s", uploader.id, video.id)
    return get_video(db, video.id)


def creator_stats(db: Session, creator_id: str) -> CreatorStats:
    videos = db.execute(
        select(Video)
        .where(Video.uploader_id == creator_id)
        .options(selectinload(Video.verification_requests))
    ).scalars().all()

    verified = rejected = pending = 0
    for video in videos:
        statuses = {request.status for request in video.verification_requests}
        if VerificationStatus.VERIFIED in statuses:
            verified += 1
        elif VerificationStatus.REJECTED in statuses:
            rejected += 1
        elif VerificationStatus.PENDING in statuses:
            pending += 1

    return CreatorStats(
        total_videos=len(videos),
        total_views=sum(video.view_count or 0 for video in videos),
        verified_count=verified,
        pending_count=pending,
        rejected_count=rejected,
    )


def list_users(db: Session) -> list[User]:
    """Return every account, alphabetically by username."""
    return list(db.execute(select(User).order_by(User.username)).scalars())
