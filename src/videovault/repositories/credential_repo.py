"""Data access helpers for stored passkey credentials."""
from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from videovault.models import Passkey

__all__ = ["CredentialRepository"]


class CredentialRepository:
    """Thin wrapper around database access for passkey credentials."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def list_for_user(self, user_id: str) -> list[Passkey]:
        """Return every credential registered by a reviewer, oldest first."""
        result = self.session.execute(
            select(Passkey).where(Passkey.user_id == user_id).order_by(Passkey.created_at)
        )
        return list(result.scalars())

    def get_by_credential_id(self, credential_id: str) -> Passkey | None:
        """Return the credential with the given URL-safe base64 identifier."""
        result = self.session.execute(
            select(Passkey).where(Passkey.credential_id == credential_id)
        )
        return result.scalars().first()

    def create(
        self,
        *,
        user_id: str,
        credential_id: str,
        public_key: bytes,
        counter: int,
        transports: list[str] | None = None,
    ) -> Passkey:
        """Insert and commit a new credential.

        Args:
            user_id: Owning reviewer.
            credential_id: URL-safe base64 credential identifier.
            public_key: CBOR-encoded COSE public key.
            counter: Signature counter reported at registration.
            transports: Optional transport hints, stored comma-joined.
        """
        passkey = Passkey(
            user_id=user_id,
            credential_id=credential_id,
            public_key=public_key,
            counter=counter,
            transports=",".join(transports) if transports else None,
        )
        self.session.add(passkey)
        self.session.commit()
        self.session.refresh(passkey)
        return passkey

    def update_counter(self, passkey_id: str, counter: int) -> None:
        """Overwrite the stored signature counter and commit."""
        self.session.execute(
            update(Passkey).where(Passkey.id == passkey_id).values(counter=counter)
        )
        self.session.commit()
