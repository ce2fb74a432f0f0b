"""Notification persistence and live delivery.

``NotificationHub`` is the registry of live channels (one asyncio queue per
connected WebSocket). It is injected wherever notifications are emitted, so a
multi-process deployment can swap it for a pub/sub backed implementation
exposing the same ``subscribe`` / ``unsubscribe`` / ``publish`` methods.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from threading import Lock
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from videovault.models import Notification
from videovault.schemas.notification import NotificationResponse

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Subscription:
    """A live channel for one user, bound to the event loop that reads it."""

    user_id: str
    loop: asyncio.AbstractEventLoop
    queue: asyncio.Queue[dict[str, Any]] = field(default_factory=asyncio.Queue)

    def deliver(self, message: dict[str, Any]) -> None:
        # publish() may run on a worker thread; hand off to the owning loop.
        self.loop.call_soon_threadsafe(self.queue.put_nowait, message)


class NotificationHub:
    """In-process registry mapping user ids to their live channels."""

    def __init__(self) -> None:
        self._channels: dict[str, set[Subscription]] = defaultdict(set)
        self._lock = Lock()

    def subscribe(self, user_id: str) -> Subscription:
        """Register a channel for ``user_id``; must be called from the reading loop."""
        subscription = Subscription(user_id=user_id, loop=asyncio.get_running_loop())
        with self._lock:
            self._channels[user_id].add(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        """Remove a channel, dropping the user's entry once it has none left."""
        with self._lock:
            channels = self._channels.get(subscription.user_id)
            if channels is None:
                return
            channels.discard(subscription)
            if not channels:
                del self._channels[subscription.user_id]

    def publish(self, user_id: str, message: dict[str, Any]) -> int:
        """Send ``message`` to every live channel of ``user_id``.

        Returns the number of channels reached. Channels whose loop has
        closed are dropped.
        """
        with self._lock:
            targets = list(self._channels.get(user_id, ()))
        delivered = 0
        for subscription in targets:
            try:
                subscription.deliver(message)
            except RuntimeError:
                logger.info("Dropping closed notification channel for user %s", user_id)
                self.unsubscribe(subscription)
                continue
            delivered += 1
        return delivered

    def connection_count(self, user_id: str) -> int:
        with self._lock:
            return len(self._channels.get(user_id, ()))


_HUB = NotificationHub()


def get_notification_hub() -> NotificationHub:
    """Return the process-wide notification hub."""
    return _HUB


def notify(
    db: Session,
    hub: NotificationHub,
    *,
    user_id: str,
    type: str,
    title: str,
    message: str,
    link: str | None = None,
) -> Notification | None:
    """Persist a notification and push it to the user's live channels.

    Emission is fire-and-forget: a storage failure is logged and ``None`` is
    returned, the caller's own work is never undone.
    """
    notification = Notification(
        user_id=user_id,
        type=type,
        title=title,
        message=message,
        link=link,
    )
    try:
        db.add(notification)
        db.commit()
        db.refresh(notification)
    except SQLAlchemyError:
        db.rollback()
        logger.error("Failed to store %s notification for user %s", type, user_id, exc_info=True)
        return None

    payload = NotificationResponse.model_validate(notification).model_dump(
        mode="json",
        by_alias=True,
    )
    hub.publish(user_id, {"type": "notification", "data": payload})
    return notification


def list_notifications(db: Session, user_id: str) -> list[Notification]:
    """Return a user's notifications, newest first."""
    result = db.execute(
        select(Notification)
        .where(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc())
    )
    return list(result.scalars())


def unread_count(db: Session, user_id: str) -> int:
    result = db.execute(
        select(func.count())
        .select_from(Notification)
        .where(Notification.user_id == user_id, Notification.read.is_(False))
    )
    return int(result.scalar_one())


def mark_read(db: Session, user_id: str, notification_id: str) -> bool:
    """Mark one of the user's notifications read; False if it is not theirs."""
    result = db.execute(
        update(Notification)
        .where(Notification.id == notification_id, Notification.user_id == user_id)
        .values(read=True)
    )
    db.commit()
    return bool(result.rowcount)


def mark_all_read(db: Session, user_id: str) -> int:
    result = db.execute(
        update(Notification)
        .where(Notification.user_id == user_id, Notification.read.is_(False))
        .values(read=True)
    )
    db.commit()
    return int(result.rowcount)
