"""Creator authorization requests and their administrative review."""

from __future__ import annotations

from fastapi import APIRouter

from videovault.api.v1.dependencies import (
    AdminContextDep,
    CreatorContextDep,
    NotificationHubDep,
    SessionContextDep,
    SessionDep,
)
from videovault.api.v1.errors import service_errors
from videovault.schemas import AuthRequestResponse, AuthRequestWithCreator
from videovault.services.auth_requests import AuthRequestAction, AuthRequestService

router = APIRouter(tags=["auth-requests"])


@router.post("/auth-requests", response_model=AuthRequestResponse)
async def submit_auth_request(
    context: CreatorContextDep,
    db: SessionDep,
    hub: NotificationHubDep,
) -> AuthRequestResponse:
    """File the caller's request to become auth-approved; at most once."""
    with service_errors(db, "auth request submission"):
        request = AuthRequestService(db, hub).submit(context.user)
        return AuthRequestResponse.model_validate(request)


@router.get("/auth-requests/my", response_model=AuthRequestResponse | None)
async def my_auth_request(
    context: SessionContextDep,
    db: SessionDep,
    hub: NotificationHubDep,
) -> AuthRequestResponse | None:
    """Return the caller's request, or null if none was filed."""
    with service_errors(db, "auth request lookup"):
        request = AuthRequestService(db, hub).for_creator(context.user.id)
        return AuthRequestResponse.model_validate(request) if request else None


@router.get("/admin/auth-requests", response_model=list[AuthRequestWithCreator])
async def list_auth_requests(
    _context: AdminContextDep,
    db: SessionDep,
    hub: NotificationHubDep,
) -> list[AuthRequestWithCreator]:
    with service_errors(db, "auth request listing"):
        requests = AuthRequestService(db, hub).list_all()
        return [AuthRequestWithCreator.model_validate(request) for request in requests]


@router.post("/admin/auth-requests/{request_id}/{action}", response_model=AuthRequestResponse)
async def decide_auth_request(
    request_id: str,
    action: AuthRequestAction,
    _context: AdminContextDep,
    db: SessionDep,
    hub: NotificationHubDep,
) -> AuthRequestResponse:
    """Approve or reject a pending request; approval grants the creator standing."""
    with service_errors(db, "auth request decision"):
        request = AuthRequestService(db, hub).decide(request_id, action)
        return AuthRequestResponse.model_validate(request)
