"""Session token utilities built on JSON Web Tokens."""
from __future__ import annotations

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from videovault.core.settings import settings


class InvalidTokenError(ValueError):
    """Raised when a session token cannot be trusted."""


def create_access_token(user_id: str, session_id: str) -> str:
    """Create a signed token naming a user and their server-side session.

    Args:
        user_id: Identifier of the authenticated user (``sub`` claim).
        session_id: Identifier of the session row (``sid`` claim).

    Returns:
        Encoded JWT string.
    """
    expire = datetime.now(UTC) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode: dict[str, object] = {"sub": user_id, "sid": session_id, "exp": expire}
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_access_token(token: str) -> tuple[str, str]:
    """Return ``(user_id, session_id)`` from a session token.

    Raises:
        InvalidTokenError: If the token is malformed, expired, forged or
            missing either claim.
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as err:
        raise InvalidTokenError("Could not validate credentials") from err

    subject = payload.get("sub")
    session_id = payload.get("sid")
    if not isinstance(subject, str) or not isinstance(session_id, str):
        raise InvalidTokenError("Could not validate credentials")
    return subject, session_id
