"""Passkey registration and authentication ceremony endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body

from videovault.api.v1.dependencies import RelyingPartyDep, SessionDep, VipContextDep
from videovault.api.v1.errors import service_errors
from videovault.schemas import SuccessResponse
from videovault.services.passkeys import AuthenticationFlow, RegistrationFlow

router = APIRouter(prefix="/webauthn", tags=["webauthn"])


@router.post("/register/options")
async def registration_options(
    context: VipContextDep,
    rp: RelyingPartyDep,
    db: SessionDep,
) -> dict[str, Any]:
    """Issue creation options for a new passkey.

    The challenge is stored on the caller's session, replacing any earlier one.
    """
    with service_errors(db, "registration options"):
        return RegistrationFlow(db).begin(context.user, context.web_session, rp)


@router.post("/register/verify", response_model=SuccessResponse)
async def registration_verify(
    context: VipContextDep,
    rp: RelyingPartyDep,
    db: SessionDep,
    credential: dict[str, Any] = Body(..., description="Attestation response JSON"),
) -> SuccessResponse:
    """Verify an attestation against the session challenge and store the passkey."""
    with service_errors(db, "registration verify"):
        RegistrationFlow(db).verify(context.user, context.web_session, rp, credential)
    return SuccessResponse()


@router.post("/authenticate/options")
async def authentication_options(
    context: VipContextDep,
    rp: RelyingPartyDep,
    db: SessionDep,
) -> dict[str, Any]:
    """Issue request options listing the caller's passkeys."""
    with service_errors(db, "authentication options"):
        return AuthenticationFlow(db).begin(context.user, context.web_session, rp)
