"""Reviewer decisions on verification requests.

A decision moves a pending request to a terminal status. ``verify`` and
``reject`` must be authorised by a passkey assertion over the session's
current challenge; ``ignore`` needs no passkey. Every check runs before the
first write, so a refused decision leaves all requests pending.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from videovault.models import User, VerificationRequest, VerificationStatus, WebSession
from videovault.repositories import CredentialRepository, VerificationRequestRepository
from videovault.services.errors import (
    InvalidBatchError,
    PasskeyRequiredError,
    RequestNotFoundError,
    RequestNotPendingError,
    RequestOwnershipError,
)
from videovault.services.notifications import NotificationHub, notify
from videovault.services.passkeys import AuthenticationFlow
from videovault.services.webauthn import RelyingParty

logger = logging.getLogger(__name__)


class DecisionAction(str, enum.Enum):
    """What a reviewer decided."""

    VERIFY = "verify"
    REJECT = "reject"
    IGNORE = "ignore"

    @property
    def target_status(self) -> VerificationStatus:
        return _TARGET_STATUS[self]

    @property
    def requires_passkey(self) -> bool:
        return self is not DecisionAction.IGNORE


_TARGET_STATUS: dict[DecisionAction, VerificationStatus] = {
    DecisionAction.VERIFY: VerificationStatus.VERIFIED,
    DecisionAction.REJECT: VerificationStatus.REJECTED,
    DecisionAction.IGNORE: VerificationStatus.IGNORED,
}

# (title, verb) used in the message sent to the video owner.
_OUTCOME_COPY: dict[VerificationStatus, tuple[str, str]] = {
    VerificationStatus.VERIFIED: ("Video Verified", "verified"),
    VerificationStatus.REJECTED: ("Verification Rejected", "rejected verification of"),
    VerificationStatus.IGNORED: ("Verification Request Declined", "declined to review"),
}


@dataclass(frozen=True)
class BatchOutcome:
    """Requests transitioned by a batch decision."""

    request_ids: list[str]

    @property
    def processed(self) -> int:
        return len(self.request_ids)


class DecisionService:
    """State machine applying reviewer decisions."""

    def __init__(self, db: Session, hub: NotificationHub) -> None:
        self.db = db
        self.hub = hub
        self.requests = VerificationRequestRepository(db)
        self.credentials = CredentialRepository(db)
        self.authentication = AuthenticationFlow(db)

    def decide(
        self,
        *,
        reviewer: User,
        web_session: WebSession,
        rp: RelyingParty,
        request_id: str,
        action: DecisionAction,
        assertion: Mapping[str, Any] | None = None,
    ) -> VerificationRequest:
        """Apply ``action`` to one request addressed to ``reviewer``.

        Raises:
            RequestNotFoundError: The request does not exist.
            RequestOwnershipError: The request targets another reviewer.
            RequestNotPendingError: The request already left the pending state.
            PasskeyRequiredError: A passkey action without passkey or assertion.
            PasskeyVerificationError: The assertion did not verify.
        """
        request = self.requests.get(request_id)
        if request is None:
            raise RequestNotFoundError("Request not found")
        if request.vip_id != reviewer.id:
            logger.warning(
                "Reviewer %s attempted to decide request %s addressed to %s",
                reviewer.id,
                request_id,
                request.vip_id,
            )
            raise RequestOwnershipError("Request is not addressed to you")
        if request.status != VerificationStatus.PENDING:
            raise RequestNotPendingError("Request has already been processed")

        self._authorize(
            reviewer,
            web_session,
            rp,
            action,
            assertion,
            missing_passkey_detail="Passkey authentication required",
            missing_assertion_detail="Passkey authentication required",
        )

        updated = self.requests.transition(request_id, action.target_status)
        if updated is None:
            raise RequestNotPendingError("Request has already been processed")

        logger.info(
            "Reviewer %s marked request %s as %s",
            reviewer.id,
            request_id,
            updated.status.value,
        )
        self._announce(reviewer, [updated])
        return updated

    def decide_batch(
        self,
        *,
        reviewer: User,
        web_session: WebSession,
        rp: RelyingParty,
        request_ids: Sequence[str],
        action: DecisionAction,
        assertion: Mapping[str, Any] | None = None,
    ) -> BatchOutcome:
        """Apply ``action`` to every named request under one assertion.

        Validation is all-or-nothing: one missing, foreign or non-pending
        request refuses the whole batch before the assertion is looked at.
        The transitions are then committed together in one transaction.

        Raises:
            InvalidBatchError: Empty list or any request failing validation.
            PasskeyRequiredError: A passkey action without passkey or assertion.
            PasskeyVerificationError: The assertion did not verify.
            RequestNotPendingError: A request was decided concurrently between
                validation and commit; nothing was applied.
        """
        ids = list(dict.fromkeys(request_ids))
        if not ids:
            raise InvalidBatchError("No request IDs provided")

        found = self.requests.get_many(ids)
        invalid = [
            request_id
            for request_id in ids
            if request_id not in found
            or found[request_id].vip_id != reviewer.id
            or found[request_id].status != VerificationStatus.PENDING
        ]
        if invalid:
            logger.info(
                "Refused batch %s by reviewer %s: %d invalid request(s)",
                action.value,
                reviewer.id,
                len(invalid),
            )
            raise InvalidBatchError("Some requests are invalid or not pending")

        self._authorize(
            reviewer,
            web_session,
            rp,
            action,
            assertion,
            missing_passkey_detail="No passkey registered",
            missing_assertion_detail="Passkey verification required",
        )

        updated = self.requests.transition_many(ids, action.target_status, vip_id=reviewer.id)
        if updated is None:
            raise RequestNotPendingError("Some requests were processed concurrently")

        logger.info(
            "Reviewer %s marked %d request(s) as %s",
            reviewer.id,
            len(updated),
            action.target_status.value,
        )
        self._announce(reviewer, updated)
        return BatchOutcome(request_ids=[request.id for request in updated])

    def _authorize(
        self,
        reviewer: User,
        web_session: WebSession,
        rp: RelyingParty,
        action: DecisionAction,
        assertion: Mapping[str, Any] | None,
        *,
        missing_passkey_detail: str,
        missing_assertion_detail: str,
    ) -> None:
        if not action.requires_passkey:
            return
        if not self.credentials.list_for_user(reviewer.id):
            raise PasskeyRequiredError(missing_passkey_detail)
        if not assertion:
            raise PasskeyRequiredError(missing_assertion_detail)
        self.authentication.verify(reviewer, web_session, rp, assertion)

    def _announce(self, reviewer: User, requests: Sequence[VerificationRequest]) -> None:
        """Tell each video's owner about the new status, one event per request."""
        for request in requests:
            video = request.video
            title, verb = _OUTCOME_COPY[request.status]
            notify(
                self.db,
                self.hub,
                user_id=video.uploader_id,
                type="verification_update",
                title=title,
                message=f'{reviewer.label} {verb} "{video.title}".',
                link=f"/videos/{video.id}",
            )
