"""Per-session challenge storage.

Each session row holds one challenge slot. Beginning a ceremony overwrites the
slot; verifying consumes it, so a challenge can be checked at most once.
Two ceremonies running concurrently on one session will clobber each other;
clients are expected to run one ceremony per session at a time.
"""

from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from videovault.db.ids import new_session_id
from videovault.models import User, WebSession


def open_session(db: Session, user: User) -> WebSession:
    """Create a session row for an authenticated user."""
    web_session = WebSession(id=new_session_id(), user_id=user.id)
    db.add(web_session)
    db.commit()
    db.refresh(web_session)
    return web_session


def close_session(db: Session, session_id: str) -> None:
    """Delete a session row, discarding any live challenge."""
    web_session = db.get(WebSession, session_id)
    if web_session is not None:
        db.delete(web_session)
        db.commit()


def store_challenge(db: Session, web_session: WebSession, challenge: str) -> None:
    """Overwrite the session's challenge slot."""
    db.execute(
        update(WebSession).where(WebSession.id == web_session.id).values(challenge=challenge)
    )
    db.commit()


def take_challenge(db: Session, web_session: WebSession) -> str | None:
    """Return the session's challenge and clear the slot."""
    challenge = db.execute(
        select(WebSession.challenge).where(WebSession.id == web_session.id)
    ).scalar_one_or_none()
    if challenge is None:
        return None
    result = db.execute(
        update(WebSession)
        .where(WebSession.id == web_session.id, WebSession.challenge == challenge)
        .values(challenge=None)
    )
    db.commit()
    # Another request consumed or replaced it between the read and the write.
    if result.rowcount != 1:
        return None
    return challenge
