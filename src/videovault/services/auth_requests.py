"""Creator authorization requests reviewed by administrators."""

from __future__ import annotations

import enum
import logging

from sqlalchemy import select, update
from sqlalchemy.orm import Session, selectinload

from videovault.db.time import utcnow
from videovault.models import AuthRequest, AuthRequestStatus, User, UserRole
from videovault.services.errors import (
    DuplicateAuthRequestError,
    NotFoundError,
    RequestNotPendingError,
)
from videovault.services.notifications import NotificationHub, notify

logger = logging.getLogger(__name__)


class AuthRequestAction(str, enum.Enum):
    APPROVE = "approve"
    REJECT = "reject"

    @property
    def target_status(self) -> AuthRequestStatus:
        if self is AuthRequestAction.APPROVE:
            return AuthRequestStatus.APPROVED
        return AuthRequestStatus.REJECTED


class AuthRequestService:
    """Submission and review of creator authorization requests."""

    def __init__(self, db: Session, hub: NotificationHub) -> None:
        self.db = db
        self.hub = hub

    def for_creator(self, creator_id: str) -> AuthRequest | None:
        result = self.db.execute(select(AuthRequest).where(AuthRequest.creator_id == creator_id))
        return result.scalars().first()

    def list_all(self) -> list[AuthRequest]:
        """Return every request with its creator, newest first."""
        result = self.db.execute(
            select(AuthRequest)
            .options(selectinload(AuthRequest.creator))
            .order_by(AuthRequest.created_at.desc())
        )
        return list(result.scalars())

    def submit(self, creator: User) -> AuthRequest:
        """File the creator's single authorization request and alert admins.

        Raises:
            DuplicateAuthRequestError: The creator already filed one.
        """
        if self.for_creator(creator.id) is not None:
            raise DuplicateAuthRequestError("Request already submitted")

        request = AuthRequest(creator_id=creator.id)
        creator.has_requested_auth = True
        self.db.add(request)
        self.db.commit()
        self.db.refresh(request)
        logger.info("Creator %s submitted authorization request %s", creator.id, request.id)

        admins = self.db.execute(select(User).where(User.role == UserRole.ADMIN)).scalars().all()
        for admin in admins:
            notify(
                self.db,
                self.hub,
                user_id=admin.id,
                type="auth_request",
                title="New Authorization Request",
                message=f"{creator.label} has requested VIP verification access.",
                link="/admin/requests",
            )
        return request

    def decide(self, request_id: str, action: AuthRequestAction) -> AuthRequest:
        """Approve or reject a pending request.

        Approval marks the creator as auth-approved in the same transaction.

        Raises:
            NotFoundError: No such request.
            RequestNotPendingError: The request was already decided.
        """
        request = self.db.get(AuthRequest, request_id)
        if request is None:
            raise NotFoundError("Request not found")

        result = self.db.execute(
            update(AuthRequest)
            .where(AuthRequest.id == request_id, AuthRequest.status == AuthRequestStatus.PENDING)
            .values(status=action.target_status, processed_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            self.db.rollback()
            raise RequestNotPendingError("Request has already been processed")
        if action is AuthRequestAction.APPROVE:
            self.db.execute(
                update(User)
                .where(User.id == request.creator_id)
                .values(is_auth_approved=True)
                .execution_options(synchronize_session=False)
            )
        self.db.commit()
        self.db.refresh(request)
        logger.info("Authorization request %s marked %s", request_id, request.status.value)
        return request
