"""Data access helpers for verification requests."""
from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select, update
from sqlalchemy.orm import Session, selectinload

from videovault.db.time import utcnow
from videovault.models import Video, VerificationRequest, VerificationStatus

__all__ = ["VerificationRequestRepository"]


class VerificationRequestRepository:
    """Database access for verification requests.

    Status writes are guarded by ``status = 'pending'`` in the UPDATE itself,
    so a request can leave the pending state at most once even when several
    processes race on it.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, request_id: str) -> VerificationRequest | None:
        """Return a request by identifier."""
        return self.session.get(VerificationRequest, request_id)

    def get_many(self, request_ids: Sequence[str]) -> dict[str, VerificationRequest]:
        """Return the named requests keyed by id, fetched in one query."""
        if not request_ids:
            return {}
        result = self.session.execute(
            select(VerificationRequest).where(VerificationRequest.id.in_(list(request_ids)))
        )
        return {request.id: request for request in result.scalars()}

    def list_for_vip(self, vip_id: str) -> list[VerificationRequest]:
        """Return requests addressed to a reviewer, newest first."""
        result = self.session.execute(
            select(VerificationRequest)
            .where(VerificationRequest.vip_id == vip_id)
            .options(
                selectinload(VerificationRequest.video).selectinload(Video.uploader),
            )
            .order_by(VerificationRequest.created_at.desc())
        )
        return list(result.scalars())

    def create(self, *, video_id: str, vip_id: str) -> VerificationRequest:
        """Insert a pending request without committing."""
        request = VerificationRequest(video_id=video_id, vip_id=vip_id)
        self.session.add(request)
        self.session.flush()
        return request

    def transition(
        self,
        request_id: str,
        status: VerificationStatus,
    ) -> VerificationRequest | None:
        """Move one pending request to a terminal status and commit.

        Returns the refreshed request, or ``None`` if it no longer exists or
        is not pending any more; in that case nothing is written.
        """
        result = self.session.execute(
            update(VerificationRequest)
            .where(
                VerificationRequest.id == request_id,
                VerificationRequest.status == VerificationStatus.PENDING,
            )
            .values(status=status, processed_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            self.session.rollback()
            return None
        self.session.commit()
        request = self.session.get(VerificationRequest, request_id)
        if request is not None:
            self.session.refresh(request)
        return request

    def transition_many(
        self,
        request_ids: Sequence[str],
        status: VerificationStatus,
        *,
        vip_id: str,
    ) -> list[VerificationRequest] | None:
        """Move every named request to ``status`` in a single transaction.

        All rows must still be pending and addressed to ``vip_id``; if any is
        not, the transaction is rolled back and ``None`` is returned.
        """
        ids = list(request_ids)
        result = self.session.execute(
            update(VerificationRequest)
            .where(
                VerificationRequest.id.in_(ids),
                VerificationRequest.vip_id == vip_id,
                VerificationRequest.status == VerificationStatus.PENDING,
            )
            .values(status=status, processed_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != len(ids):
            self.session.rollback()
            return None
        self.session.commit()
        updated = self.get_many(ids)
        for request in updated.values():
            self.session.refresh(request)
        return [updated[request_id] for request_id in ids]
