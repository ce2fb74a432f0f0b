# tests/test_manage.py
import pytest

from videovault.core.security import decode_access_token
from videovault.models import UserRole, Video, WebSession
from videovault.scripts.manage import add_video, create_user, issue_token


def test_create_user_and_issue_token(db_session):
    user = create_user(db_session, "vera", UserRole.VIP, "Vera")

    token = issue_token(db_session, "vera")

    user_id, session_id = decode_access_token(token)
    assert user_id == user.id
    assert db_session.get(WebSession, session_id).user_id == user.id


def test_duplicate_and_unknown_users(db_session):
    create_user(db_session, "vera", UserRole.VIP)

    with pytest.raises(ValueError):
        create_user(db_session, "vera", UserRole.VIP)
    with pytest.raises(ValueError):
        issue_token(db_session, "nobody")


def test_add_video_for_creator(db_session):
    creator = create_user(db_session, "cleo", UserRole.CREATOR)

    video_id = add_video(db_session, "cleo", "Harbour at dawn", "/media/harbour.mp4")

    video = db_session.get(Video, video_id)
    assert video.uploader_id == creator.id
    assert video.view_count == 0


def test_add_video_refuses_reviewers(db_session):
    create_user(db_session, "vera", UserRole.VIP)

    with pytest.raises(ValueError, match="VIPs cannot upload videos"):
        add_video(db_session, "vera", "Clip", "/media/clip.mp4")
