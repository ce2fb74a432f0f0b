# src/videovault/scripts/manage.py
"""Operator commands: create tables, seed accounts and videos, issue session tokens.

Password login is not part of this service; an operator (or the fronting
identity provider) opens sessions with ``issue-token``.
"""

from __future__ import annotations

import argparse
import sys

from sqlalchemy import select
from sqlalchemy.orm import Session

from videovault.core.security import create_access_token
from videovault.db.session import SessionLocal, create_tables
from videovault.models import User, UserRole
from videovault.services.errors import VerificationServiceError
from videovault.services.session_state import open_session
from videovault.services.videos import create_video


def create_user(
    db: Session,
    username: str,
    role: UserRole,
    display_name: str | None = None,
    *,
    approved: bool = False,
) -> User:
    """Insert an account, failing if the username is taken."""
    if db.execute(select(User).where(User.username == username)).scalars().first():
        raise ValueError(f"User {username!r} already exists")
    user = User(
        username=username,
        role=role,
        display_name=display_name,
        is_auth_approved=approved,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def issue_token(db: Session, username: str) -> str:
    """Open a session for ``username`` and return its bearer token."""
    user = db.execute(select(User).where(User.username == username)).scalars().first()
    if user is None:
        raise ValueError(f"User {username!r} not found")
    web_session = open_session(db, user)
    return create_access_token(user.id, web_session.id)


def add_video(
    db: Session,
    username: str,
    title: str,
    video_url: str,
    description: str | None = None,
) -> str:
    """Register hosted media under ``username`` and return the new video id."""
    user = db.execute(select(User).where(User.username == username)).scalars().first()
    if user is None:
        raise ValueError(f"User {username!r} not found")
    try:
        video = create_video(db, user, title=title, video_url=video_url, description=description)
    except VerificationServiceError as exc:
        raise ValueError(exc.detail) from exc
    return video.id


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="VideoVault operator commands")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("init-db", help="Create all tables")

    user_parser = commands.add_parser("create-user", help="Create an account")
    user_parser.add_argument("username")
    user_parser.add_argument(
        "--role",
        choices=[role.value for role in UserRole],
        default=UserRole.CREATOR.value,
    )
    user_parser.add_argument("--display-name", default=None)
    user_parser.add_argument(
        "--approved",
        action="store_true",
        help="Mark a creator as allowed to request VIP verification",
    )

    video_parser = commands.add_parser("create-video", help="Register a hosted video")
    video_parser.add_argument("username")
    video_parser.add_argument("title")
    video_parser.add_argument("video_url")
    video_parser.add_argument("--description", default=None)

    token_parser = commands.add_parser("issue-token", help="Open a session and print its token")
    token_parser.add_argument("username")

    args = parser.parse_args(argv)

    if args.command == "init-db":
        create_tables()
        print("Database initialized.")
        return 0

    with SessionLocal() as db:
        try:
            if args.command == "create-user":
                user = create_user(
                    db,
                    args.username,
                    UserRole(args.role),
                    args.display_name,
                    approved=args.approved,
                )
                print(f"Created {user.role.value} {user.username} ({user.id})")
            elif args.command == "create-video":
                print(
                    add_video(db, args.username, args.title, args.video_url, args.description)
                )
            else:
                print(issue_token(db, args.username))
        except ValueError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
