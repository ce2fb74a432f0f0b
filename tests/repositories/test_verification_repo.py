# tests/repositories/test_verification_repo.py
"""Guarded status transitions on verification requests."""

from __future__ import annotations

from collections.abc import Callable
from datetime import timedelta

from sqlalchemy import update
from sqlalchemy.orm import Session

from videovault.models import User, VerificationRequest, VerificationStatus, Video
from videovault.repositories import VerificationRequestRepository


def test_transition_stamps_processed_at_once(
    db_session: Session,
    vip: User,
    video: Video,
    make_request: Callable[..., VerificationRequest],
) -> None:
    repo = VerificationRequestRepository(db_session)
    request = make_request(video, vip)

    updated = repo.transition(request.id, VerificationStatus.VERIFIED)

    assert updated is not None
    assert updated.status is VerificationStatus.VERIFIED
    assert updated.processed_at is not None
    assert repo.transition(request.id, VerificationStatus.REJECTED) is None
    assert repo.get(request.id).status is VerificationStatus.VERIFIED


def test_transition_many_is_all_or_nothing(
    db_session: Session,
    vip: User,
    video: Video,
    make_request: Callable[..., VerificationRequest],
) -> None:
    repo = VerificationRequestRepository(db_session)
    first = make_request(video, vip).id
    second = make_request(video, vip).id
    # Simulates another reviewer session deciding one row after validation.
    db_session.execute(
        update(VerificationRequest)
        .where(VerificationRequest.id == second)
        .values(status=VerificationStatus.IGNORED)
    )
    db_session.commit()

    assert repo.transition_many([first, second], VerificationStatus.VERIFIED, vip_id=vip.id) is None
    db_session.expire_all()
    assert repo.get(first).status is VerificationStatus.PENDING
    assert repo.get(first).processed_at is None


def test_transition_many_is_scoped_to_reviewer(
    db_session: Session,
    vip: User,
    other_vip: User,
    video: Video,
    make_request: Callable[..., VerificationRequest],
) -> None:
    repo = VerificationRequestRepository(db_session)
    request = make_request(video, vip).id

    assert repo.transition_many([request], VerificationStatus.VERIFIED, vip_id=other_vip.id) is None

    updated = repo.transition_many([request], VerificationStatus.VERIFIED, vip_id=vip.id)
    assert [item.id for item in updated or []] == [request]


def test_get_many_and_queue_order(
    db_session: Session,
    vip: User,
    video: Video,
    make_request: Callable[..., VerificationRequest],
) -> None:
    repo = VerificationRequestRepository(db_session)
    older = make_request(video, vip)
    newer = make_request(video, vip)
    newer.created_at = older.created_at + timedelta(seconds=1)
    db_session.commit()

    assert set(repo.get_many([older.id, newer.id, "missing"])) == {older.id, newer.id}
    assert [item.id for item in repo.list_for_vip(vip.id)] == [newer.id, older.id]
