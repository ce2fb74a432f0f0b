# tests/conftest.py
from __future__ import annotations

from collections.abc import Callable, Generator, Iterator
from dataclasses import dataclass
from itertools import count
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from authenticator import SoftAuthenticator
from videovault.api.v1.dependencies import get_hub
from videovault.core.security import create_access_token
from videovault.db.session import Base
from videovault.db.session import get_db as app_get_session
from videovault.db.session import get_session_factory
from videovault.main import app as fastapi_app
from videovault.models import User, UserRole, VerificationRequest, Video
from videovault.services.notifications import NotificationHub
from videovault.services.session_state import open_session

TEST_DB_URL = "sqlite://"

_USERNAME_COUNTER = count(1)


@dataclass(frozen=True)
class Login:
    """Bearer headers for one open session."""

    user_id: str
    session_id: str
    headers: dict[str, str]


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        # Services commit, so each test wipes every table afterwards.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def hub() -> NotificationHub:
    return NotificationHub()


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI,
    engine: Engine,
    db_session: Session,
    hub: NotificationHub,
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_session_factory] = lambda: sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
    )
    app.dependency_overrides[get_hub] = lambda: hub
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)
        app.dependency_overrides.pop(get_session_factory, None)
        app.dependency_overrides.pop(get_hub, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    def _make_user(role: UserRole, **fields: Any) -> User:
        fields.setdefault("username", f"{role.value}{next(_USERNAME_COUNTER)}")
        user = User(role=role, **fields)
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def vip(make_user: Callable[..., User]) -> User:
    return make_user(UserRole.VIP, display_name="Vera Vip")


@pytest.fixture()
def other_vip(make_user: Callable[..., User]) -> User:
    return make_user(UserRole.VIP, display_name="Otto Other")


@pytest.fixture()
def creator(make_user: Callable[..., User]) -> User:
    return make_user(UserRole.CREATOR, display_name="Cleo Creator", is_auth_approved=True)


@pytest.fixture()
def admin(make_user: Callable[..., User]) -> User:
    return make_user(UserRole.ADMIN)


@pytest.fixture()
def login(db_session: Session) -> Callable[[User], Login]:
    """Open a server-side session for a user and return its bearer headers."""

    def _login(user: User) -> Login:
        web_session = open_session(db_session, user)
        token = create_access_token(user.id, web_session.id)
        return Login(
            user_id=user.id,
            session_id=web_session.id,
            headers={"Authorization": f"Bearer {token}"},
        )

    return _login


@pytest.fixture()
def video(db_session: Session, creator: User) -> Video:
    video = Video(
        title="Harbour at dawn",
        description="Unedited footage",
        video_url="/uploads/harbour.mp4",
        uploader_id=creator.id,
    )
    db_session.add(video)
    db_session.commit()
    db_session.refresh(video)
    return video


@pytest.fixture()
def make_request(db_session: Session) -> Callable[[Video, User], VerificationRequest]:
    def _make_request(video: Video, reviewer: User) -> VerificationRequest:
        request = VerificationRequest(video_id=video.id, vip_id=reviewer.id)
        db_session.add(request)
        db_session.commit()
        db_session.refresh(request)
        return request

    return _make_request


@pytest.fixture()
def authenticator() -> SoftAuthenticator:
    return SoftAuthenticator()


@pytest.fixture()
def register_passkey(client: TestClient) -> Callable[[Login, SoftAuthenticator], None]:
    """Run a full registration ceremony through the API."""

    def _register(session: Login, key: SoftAuthenticator) -> None:
        options = client.post("/api/v1/webauthn/register/options", headers=session.headers)
        assert options.status_code == 200, options.text
        response = client.post(
            "/api/v1/webauthn/register/verify",
            headers=session.headers,
            json=key.register(options.json()["challenge"]),
        )
        assert response.status_code == 200, response.text

    return _register


@pytest.fixture()
def sign_in(client: TestClient) -> Callable[..., dict[str, Any]]:
    """Begin authentication through the API and answer it with ``key``."""

    def _sign_in(session: Login, key: SoftAuthenticator, **kwargs: Any) -> dict[str, Any]:
        options = client.post("/api/v1/webauthn/authenticate/options", headers=session.headers)
        assert options.status_code == 200, options.text
        return key.assert_challenge(options.json()["challenge"], **kwargs)

    return _sign_in
