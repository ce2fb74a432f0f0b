"""Stored WebAuthn credentials belonging to VIP reviewers."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, DateTime, ForeignKey, LargeBinary, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from videovault.db.ids import new_uuid
from videovault.db.session import Base
from videovault.db.time import utcnow

if TYPE_CHECKING:
    from .user import User


class Passkey(Base):
    """One registered authenticator for a reviewer."""

    __tablename__ = "passkeys"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # URL-safe base64 without padding; unique across all reviewers.
    credential_id: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    # CBOR-encoded COSE public key.
    public_key: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    counter: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    # Comma-joined transport hints, e.g. "usb,nfc".
    transports: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    user: Mapped[User] = relationship("User", back_populates="passkeys")

    @property
    def transport_list(self) -> list[str]:
        """Return the transport hints as a list."""
        if not self.transports:
            return []
        return [item for item in self.transports.split(",") if item]
