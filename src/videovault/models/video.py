"""Uploaded videos awaiting or holding VIP attestation."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from videovault.db.ids import new_uuid
from videovault.db.session import Base
from videovault.db.time import utcnow

if TYPE_CHECKING:
    from .user import User
    from .verification import VerificationRequest


class Video(Base):
    """A creator's uploaded video."""

    __tablename__ = "videos"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    video_url: Mapped[str] = mapped_column(Text, nullable=False)
    uploader_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    view_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    uploader: Mapped[User] = relationship("User")
    verification_requests: Mapped[list[VerificationRequest]] = relationship(
        "VerificationRequest",
        back_populates="video",
    )
