"""Creator-side creation of verification requests."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from videovault.models import User, UserRole, VerificationRequest, Video
from videovault.repositories import VerificationRequestRepository
from videovault.services.errors import (
    InvalidSelectionError,
    NotFoundError,
    PermissionDeniedError,
)
from videovault.services.notifications import NotificationHub, notify

logger = logging.getLogger(__name__)


def list_reviewers(db: Session) -> list[User]:
    """Return every VIP reviewer, alphabetically by username."""
    result = db.execute(select(User).where(User.role == UserRole.VIP).order_by(User.username))
    return list(result.scalars())


def request_verification(
    db: Session,
    hub: NotificationHub,
    *,
    creator: User,
    video_id: str,
    vip_ids: Sequence[str],
) -> list[VerificationRequest]:
    """Ask each named reviewer to attest ``video_id``.

    Reviewers who already hold a request for the video are skipped. Every
    newly asked reviewer is notified.

    Raises:
        PermissionDeniedError: The creator is not auth-approved or does not
            own the video.
        NotFoundError: The video does not exist.
        InvalidSelectionError: No reviewers given, or one is not a VIP.
    """
    if not creator.is_auth_approved:
        raise PermissionDeniedError("Not authorized to request VIP verification")

    video = db.get(Video, video_id)
    if video is None:
        raise NotFoundError("Video not found")
    if video.uploader_id != creator.id:
        raise PermissionDeniedError("You can only request verification for your own videos")

    unique_ids = list(dict.fromkeys(vip_ids))
    if not unique_ids:
        raise InvalidSelectionError("Please select at least one VIP")

    reviewers = db.execute(select(User).where(User.id.in_(unique_ids))).scalars().all()
    found = {reviewer.id: reviewer for reviewer in reviewers if reviewer.role is UserRole.VIP}
    for vip_id in unique_ids:
        if vip_id not in found:
            raise InvalidSelectionError(f"Invalid VIP ID: {vip_id}")

    already_asked = set(
        db.execute(
            select(VerificationRequest.vip_id).where(VerificationRequest.video_id == video.id)
        ).scalars()
    )
    repo = VerificationRequestRepository(db)
    created = [
        repo.create(video_id=video.id, vip_id=vip_id)
        for vip_id in unique_ids
        if vip_id not in already_asked
    ]
    db.commit()
    logger.info(
        "Creator %s requested verification of video %s from %d reviewer(s)",
        creator.id,
        video.id,
        len(created),
    )

    for request in created:
        notify(
            db,
            hub,
            user_id=request.vip_id,
            type="verification_request",
            title="New Verification Request",
            message=f'{creator.label} has requested your verification for "{video.title}".',
            link="/vip/queue",
        )
    return created
