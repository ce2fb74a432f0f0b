"""Notification inbox endpoints and the live WebSocket channel."""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging

from fastapi import (
    APIRouter,
    HTTPException,
    Query,
    WebSocket,
    WebSocketDisconnect,
    status,
)

from videovault.api.v1.dependencies import (
    NotificationHubDep,
    SessionContextDep,
    SessionDep,
    SessionFactoryDep,
    load_session_context,
)
from videovault.api.v1.errors import service_errors
from videovault.schemas import NotificationResponse, SuccessResponse, UnreadCountResponse
from videovault.services import notifications as notification_service
from videovault.services.notifications import Subscription

router = APIRouter(tags=["notifications"])
logger = logging.getLogger(__name__)


@router.get("/notifications", response_model=list[NotificationResponse])
async def list_notifications(
    context: SessionContextDep,
    db: SessionDep,
) -> list[NotificationResponse]:
    """Return the caller's notifications, newest first."""
    with service_errors(db, "notification listing"):
        rows = notification_service.list_notifications(db, context.user.id)
        return [NotificationResponse.model_validate(row) for row in rows]


@router.get("/notifications/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(context: SessionContextDep, db: SessionDep) -> UnreadCountResponse:
    with service_errors(db, "unread count"):
        count = notification_service.unread_count(db, context.user.id)
    return UnreadCountResponse(count=count)


@router.post("/notifications/read-all", response_model=SuccessResponse)
async def mark_all_notifications_read(
    context: SessionContextDep,
    db: SessionDep,
) -> SuccessResponse:
    with service_errors(db, "mark all read"):
        notification_service.mark_all_read(db, context.user.id)
    return SuccessResponse()


@router.post("/notifications/{notification_id}/read", response_model=SuccessResponse)
async def mark_notification_read(
    notification_id: str,
    context: SessionContextDep,
    db: SessionDep,
) -> SuccessResponse:
    """Mark one of the caller's notifications as read."""
    with service_errors(db, "mark read"):
        updated = notification_service.mark_read(db, context.user.id, notification_id)
    if not updated:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Notification not found",
        )
    return SuccessResponse()


async def _forward(websocket: WebSocket, subscription: Subscription) -> None:
    while True:
        message = await subscription.queue.get()
        await websocket.send_json(message)


async def _stop_forwarder(forwarder: asyncio.Task[None]) -> None:
    """Cancel the forwarding task and collect its outcome."""
    forwarder.cancel()
    # A send on a socket the client already closed ends the task first.
    with contextlib.suppress(asyncio.CancelledError, WebSocketDisconnect, RuntimeError):
        await forwarder


@router.websocket("/ws")
async def notification_socket(
    websocket: WebSocket,
    session_factory: SessionFactoryDep,
    hub: NotificationHubDep,
    token: str = Query(..., description="Session bearer token"),
) -> None:
    """Push the caller's notifications as they are created.

    The first frame is ``{"type": "connected", "userId": ...}``; every later
    frame is ``{"type": "notification", "data": {...}}``. A ``{"type": "ping"}``
    frame from the client is answered with ``{"type": "pong"}``.

    The token is checked in a session closed before the socket is accepted,
    so an open channel holds no pooled database connection.
    """
    with session_factory() as db:
        try:
            user_id = load_session_context(db, token).user.id
        except HTTPException:
            user_id = None
    if user_id is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    subscription = hub.subscribe(user_id)
    forwarder = asyncio.create_task(_forward(websocket, subscription))
    logger.info("Notification channel opened for user %s", user_id)
    try:
        await websocket.send_json({"type": "connected", "userId": user_id})
        while True:
            text = await websocket.receive_text()
            try:
                message = json.loads(text)
            except ValueError:
                continue
            if isinstance(message, dict) and message.get("type") == "ping":
                await websocket.send_json({"type": "pong"})
    except WebSocketDisconnect:
        pass
    finally:
        await _stop_forwarder(forwarder)
        hub.unsubscribe(subscription)
        logger.info("Notification channel closed for user %s", user_id)
