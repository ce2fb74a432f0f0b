# tests/v1/test_auth_requests.py
"""Creator authorization requests and admin review."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from fastapi.testclient import TestClient
from sqlalchemy import select
from sqlalchemy.orm import Session

from videovault.models import Notification, User, UserRole


def test_creator_submits_once_and_admins_are_told(
    client: TestClient,
    db_session: Session,
    make_user: Callable[..., User],
    admin: User,
    login: Callable[[User], Any],
) -> None:
    creator = make_user(UserRole.CREATOR)
    headers = login(creator).headers

    first = client.post("/api/v1/auth-requests", headers=headers)
    second = client.post("/api/v1/auth-requests", headers=headers)
    mine = client.get("/api/v1/auth-requests/my", headers=headers)

    assert first.status_code == 200
    assert first.json()["status"] == "pending"
    assert second.status_code == 400
    assert second.json()["detail"] == "Request already submitted"
    assert mine.json()["id"] == first.json()["id"]
    db_session.expire_all()
    assert db_session.get(User, creator.id).has_requested_auth is True
    [notification] = db_session.execute(
        select(Notification).where(Notification.user_id == admin.id)
    ).scalars().all()
    assert notification.type == "auth_request"


def test_my_request_is_null_before_submission(
    client: TestClient,
    creator: User,
    login: Callable[[User], Any],
) -> None:
    response = client.get("/api/v1/auth-requests/my", headers=login(creator).headers)
    assert response.status_code == 200
    assert response.json() is None


def test_only_creators_submit(client: TestClient, vip: User, login: Callable[[User], Any]) -> None:
    assert client.post("/api/v1/auth-requests", headers=login(vip).headers).status_code == 403


def test_admin_approval_grants_standing(
    client: TestClient,
    db_session: Session,
    make_user: Callable[..., User],
    admin: User,
    login: Callable[[User], Any],
) -> None:
    creator = make_user(UserRole.CREATOR)
    request_id = client.post("/api/v1/auth-requests", headers=login(creator).headers).json()["id"]
    admin_headers = login(admin).headers

    listed = client.get("/api/v1/admin/auth-requests", headers=admin_headers)
    approved = client.post(
        f"/api/v1/admin/auth-requests/{request_id}/approve",
        headers=admin_headers,
    )
    again = client.post(f"/api/v1/admin/auth-requests/{request_id}/reject", headers=admin_headers)

    assert [item["creator"]["id"] for item in listed.json()] == [creator.id]
    assert approved.status_code == 200
    assert approved.json()["status"] == "approved"
    assert approved.json()["processedAt"] is not None
    assert again.status_code == 409
    db_session.expire_all()
    assert db_session.get(User, creator.id).is_auth_approved is True


def test_rejection_leaves_creator_unapproved(
    client: TestClient,
    db_session: Session,
    make_user: Callable[..., User],
    admin: User,
    login: Callable[[User], Any],
) -> None:
    creator = make_user(UserRole.CREATOR)
    request_id = client.post("/api/v1/auth-requests", headers=login(creator).headers).json()["id"]

    response = client.post(
        f"/api/v1/admin/auth-requests/{request_id}/reject",
        headers=login(admin).headers,
    )

    assert response.json()["status"] == "rejected"
    db_session.expire_all()
    assert db_session.get(User, creator.id).is_auth_approved is False


def test_admin_routes_are_admin_only(
    client: TestClient,
    creator: User,
    admin: User,
    login: Callable[[User], Any],
) -> None:
    headers = login(creator).headers
    assert client.get("/api/v1/admin/auth-requests", headers=headers).status_code == 403
    missing = client.post(
        "/api/v1/admin/auth-requests/missing/approve",
        headers=login(admin).headers,
    )
    assert missing.status_code == 404
