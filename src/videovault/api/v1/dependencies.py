"""Shared API dependencies for session authentication and role gates."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session, sessionmaker

from videovault.core.security import InvalidTokenError, decode_access_token
from videovault.db.session import get_db, get_session_factory
from videovault.models import User, UserRole, WebSession
from videovault.services.notifications import NotificationHub, get_notification_hub
from videovault.services.webauthn import RelyingParty, resolve_relying_party

# HTTP Bearer scheme; missing headers are reported as 401 by get_session_context.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]
# Long-lived handlers open short sessions instead of holding one per connection
SessionFactoryDep = Annotated[sessionmaker[Session], Depends(get_session_factory)]


@dataclass(frozen=True)
class SessionContext:
    """The authenticated caller and the server-side session they act through."""

    user: User
    web_session: WebSession


def load_session_context(db: Session, token: str) -> SessionContext:
    """Resolve a session token to its user and live session row.

    Args:
        db: Database session
        token: Bearer token issued by ``create_access_token``

    Raises:
        HTTPException: 401 if the token is invalid, the session was closed or
            the user no longer exists.
    """
    try:
        user_id, session_id = decode_access_token(token)
    except InvalidTokenError as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        ) from err

    web_session = db.get(WebSession, session_id)
    if web_session is None or web_session.user_id != user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session expired",
        )

    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return SessionContext(user=user, web_session=web_session)


def get_session_context(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: SessionDep,
) -> SessionContext:
    """Get the authenticated caller from the bearer token."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return load_session_context(db, credentials.credentials)


# Type alias for any authenticated caller
SessionContextDep = Annotated[SessionContext, Depends(get_session_context)]


def require_role(role: UserRole) -> Callable[[SessionContext], SessionContext]:
    """Build a dependency admitting only callers holding ``role``."""

    def _require_role(context: SessionContextDep) -> SessionContext:
        if context.user.role is not role:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Access denied",
            )
        return context

    return _require_role


VipContextDep = Annotated[SessionContext, Depends(require_role(UserRole.VIP))]
CreatorContextDep = Annotated[SessionContext, Depends(require_role(UserRole.CREATOR))]
AdminContextDep = Annotated[SessionContext, Depends(require_role(UserRole.ADMIN))]


def get_relying_party(request: Request) -> RelyingParty:
    """Derive the WebAuthn relying party from the inbound request."""
    return resolve_relying_party(
        request.headers.get("host"),
        request.headers.get("x-forwarded-proto"),
        request.url.scheme,
    )


def get_hub() -> NotificationHub:
    return get_notification_hub()


RelyingPartyDep = Annotated[RelyingParty, Depends(get_relying_party)]
NotificationHubDep = Annotated[NotificationHub, Depends(get_hub)]
