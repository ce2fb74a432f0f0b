"""Identifier helpers for database rows."""

import secrets
import uuid


def new_uuid() -> str:
    """Return a random UUID4 rendered as text, used as a primary key."""
    return str(uuid.uuid4())


def new_session_id() -> str:
    """Return an unguessable identifier for a server-side session row."""
    return secrets.token_urlsafe(32)
