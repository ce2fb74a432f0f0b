"""Server-side session rows holding the caller identity and live challenge."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from videovault.db.ids import new_session_id
from videovault.db.session import Base
from videovault.db.time import utcnow


class WebSession(Base):
    """One authenticated browser session.

    At most one WebAuthn ceremony is live per session: ``challenge`` is
    overwritten by every begin step and cleared when a verify step consumes it.
    """

    __tablename__ = "web_sessions"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_session_id)
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    challenge: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
