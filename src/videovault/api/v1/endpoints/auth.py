"""Session endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter

from videovault.api.v1.dependencies import SessionContextDep, SessionDep
from videovault.api.v1.errors import service_errors
from videovault.schemas import SuccessResponse, UserSummary
from videovault.services.session_state import close_session

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


@router.get("/me", response_model=UserSummary)
async def read_me(context: SessionContextDep) -> UserSummary:
    """Return the account behind the current session."""
    return UserSummary.model_validate(context.user)


@router.post("/logout", response_model=SuccessResponse)
async def logout(context: SessionContextDep, db: SessionDep) -> SuccessResponse:
    """End the current session, discarding any in-flight challenge.

    The bearer token stops working immediately because its session row is gone.
    """
    with service_errors(db, "logout"):
        close_session(db, context.web_session.id)
    logger.info("User %s logged out", context.user.id)
    return SuccessResponse()
