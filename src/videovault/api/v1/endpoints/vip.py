"""VIP reviewer endpoints: the review queue and its decisions."""

from __future__ import annotations

from fastapi import APIRouter

from videovault.api.v1.dependencies import (
    NotificationHubDep,
    RelyingPartyDep,
    SessionDep,
    VipContextDep,
)
from videovault.api.v1.errors import service_errors
from videovault.repositories import CredentialRepository, VerificationRequestRepository
from videovault.schemas import (
    BatchDecisionRequest,
    BatchDecisionResponse,
    DecisionRequest,
    HasPasskeyResponse,
    VerificationRequestDetail,
    VerificationRequestResponse,
)
from videovault.services.decisions import DecisionAction, DecisionService

router = APIRouter(prefix="/vip", tags=["vip"])


@router.get("/verification-requests", response_model=list[VerificationRequestDetail])
async def list_verification_requests(
    context: VipContextDep,
    db: SessionDep,
) -> list[VerificationRequestDetail]:
    """List requests addressed to the caller, newest first."""
    with service_errors(db, "list verification requests"):
        requests = VerificationRequestRepository(db).list_for_vip(context.user.id)
        return [VerificationRequestDetail.model_validate(request) for request in requests]


@router.get("/has-passkey", response_model=HasPasskeyResponse)
async def has_passkey(context: VipContextDep, db: SessionDep) -> HasPasskeyResponse:
    """Report whether the caller has registered any passkey."""
    with service_errors(db, "passkey lookup"):
        passkeys = CredentialRepository(db).list_for_user(context.user.id)
    return HasPasskeyResponse(has_passkey=bool(passkeys))


# Registered before the single-request route so "batch" is never taken for an id.
@router.post("/verification-requests/batch/{action}", response_model=BatchDecisionResponse)
async def decide_batch(
    action: DecisionAction,
    context: VipContextDep,
    rp: RelyingPartyDep,
    db: SessionDep,
    hub: NotificationHubDep,
    payload: BatchDecisionRequest,
) -> BatchDecisionResponse:
    """Apply one decision to several requests under a single passkey assertion.

    Args:
        action: verify, reject or ignore
        context: Authenticated VIP session
        rp: Relying party derived from the request
        db: Database session
        hub: Live notification registry
        payload: Request ids and the shared assertion

    Returns:
        Number and ids of the requests that changed state
    """
    with service_errors(db, "batch decision"):
        outcome = DecisionService(db, hub).decide_batch(
            reviewer=context.user,
            web_session=context.web_session,
            rp=rp,
            request_ids=payload.request_ids,
            action=action,
            assertion=payload.auth_result,
        )
    return BatchDecisionResponse(processed=outcome.processed, request_ids=outcome.request_ids)


@router.post(
    "/verification-requests/{request_id}/{action}",
    response_model=VerificationRequestResponse,
)
async def decide(
    request_id: str,
    action: DecisionAction,
    context: VipContextDep,
    rp: RelyingPartyDep,
    db: SessionDep,
    hub: NotificationHubDep,
    payload: DecisionRequest | None = None,
) -> VerificationRequestResponse:
    """Verify, reject or ignore one pending request.

    ``verify`` and ``reject`` need a passkey assertion over the session's
    current challenge; ``ignore`` does not.
    """
    with service_errors(db, "decision"):
        updated = DecisionService(db, hub).decide(
            reviewer=context.user,
            web_session=context.web_session,
            rp=rp,
            request_id=request_id,
            action=action,
            assertion=payload.auth_result if payload else None,
        )
    return VerificationRequestResponse.model_validate(updated)
