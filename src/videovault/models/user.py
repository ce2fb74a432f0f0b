"""SQLAlchemy models for platform accounts."""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Enum, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from videovault.db.ids import new_uuid
from videovault.db.session import Base

if TYPE_CHECKING:
    from .passkey import Passkey


class UserRole(str, enum.Enum):
    """Closed set of account roles; every route gate matches on these."""

    ADMIN = "admin"
    CREATOR = "creator"
    VIP = "vip"


class User(Base):
    """A platform account: creator, VIP reviewer or administrator."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    username: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    role: Mapped[UserRole] = mapped_column(
        Enum(
            UserRole,
            native_enum=False,
            length=16,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=UserRole.CREATOR,
    )
    # Display attributes, used only by the UI.
    display_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    title: Mapped[str | None] = mapped_column(Text, nullable=True)
    country: Mapped[str | None] = mapped_column(Text, nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    is_auth_approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    has_requested_auth: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    passkeys: Mapped[list[Passkey]] = relationship(
        "Passkey",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    @property
    def label(self) -> str:
        """Return the name shown to other users."""
        return self.display_name or self.username
