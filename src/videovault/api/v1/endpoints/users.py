"""Directory endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from videovault.api.v1.dependencies import AdminContextDep, SessionContextDep, SessionDep
from videovault.api.v1.errors import service_errors
from videovault.schemas import AdminUserResponse, UserSummary
from videovault.services.verification_requests import list_reviewers
from videovault.services.videos import list_users

router = APIRouter(tags=["users"])


@router.get("/vips", response_model=list[UserSummary])
async def list_vips(_context: SessionContextDep, db: SessionDep) -> list[UserSummary]:
    """List VIP reviewers a creator can ask for verification."""
    with service_errors(db, "reviewer listing"):
        reviewers = list_reviewers(db)
        return [UserSummary.model_validate(reviewer) for reviewer in reviewers]


@router.get("/admin/users", response_model=list[AdminUserResponse])
async def list_all_users(_context: AdminContextDep, db: SessionDep) -> list[AdminUserResponse]:
    with service_errors(db, "user listing"):
        return [AdminUserResponse.model_validate(user) for user in list_users(db)]
