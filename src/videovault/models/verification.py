"""Verification requests addressed by creators to VIP reviewers."""

from __future__ import annotations

import enum
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Enum, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from videovault.db.ids import new_uuid
from videovault.db.session import Base
from videovault.db.time import utcnow

if TYPE_CHECKING:
    from .user import User
    from .video import Video


class VerificationStatus(str, enum.Enum):
    """Request status. PENDING is the only non-terminal state."""

    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"
    IGNORED = "ignored"

    @property
    def is_terminal(self) -> bool:
        return self is not VerificationStatus.PENDING


class VerificationRequest(Base):
    """State machine for one reviewer's decision on one video."""

    __tablename__ = "verification_requests"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    video_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("videos.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    vip_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    status: Mapped[VerificationStatus] = mapped_column(
        Enum(
            VerificationStatus,
            native_enum=False,
            length=16,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=VerificationStatus.PENDING,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    # Set exactly once, by the terminal transition.
    processed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    video: Mapped[Video] = relationship("Video", back_populates="verification_requests")
    vip: Mapped[User] = relationship("User")
