"""Passkey registration and authentication flows for VIP reviewers."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy.orm import Session

from videovault.models import Passkey, User, WebSession
from videovault.repositories import CredentialRepository
from videovault.services import webauthn
from videovault.services.errors import (
    DuplicateCredentialError,
    PasskeyRequiredError,
    PasskeyVerificationError,
)
from videovault.services.session_state import store_challenge, take_challenge
from videovault.services.webauthn import RelyingParty, StoredCredential

logger = logging.getLogger(__name__)


def stored_credential(passkey: Passkey) -> StoredCredential:
    """Detach the verifier's view of a credential from its ORM row."""
    return StoredCredential(
        credential_id=passkey.credential_id,
        public_key=passkey.public_key,
        counter=passkey.counter,
        transports=passkey.transport_list,
    )


class RegistrationFlow:
    """Issue registration challenges and persist verified credentials."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.credentials = CredentialRepository(db)

    def begin(self, user: User, web_session: WebSession, rp: RelyingParty) -> dict[str, Any]:
        """Return creation options and store their challenge on the session.

        Credentials the reviewer already owns are excluded so the same
        authenticator is not registered twice.
        """
        existing = self.credentials.list_for_user(user.id)
        options, challenge = webauthn.generate_registration_options(
            rp,
            user_id=user.id,
            user_name=user.username,
            display_name=user.label,
            exclude=[stored_credential(passkey) for passkey in existing],
        )
        store_challenge(self.db, web_session, challenge)
        return options

    def verify(
        self,
        user: User,
        web_session: WebSession,
        rp: RelyingParty,
        response: Mapping[str, Any],
    ) -> Passkey:
        """Verify an attestation and store the new credential for ``user``.

        Raises:
            PasskeyVerificationError: If the attestation does not verify.
            DuplicateCredentialError: If the credential id is already registered.
        """
        challenge = take_challenge(self.db, web_session)
        registered = webauthn.verify_registration(rp, challenge=challenge, response=response)

        if self.credentials.get_by_credential_id(registered.credential_id) is not None:
            logger.warning("Rejected duplicate credential registration for user %s", user.id)
            raise DuplicateCredentialError("Passkey is already registered")

        passkey = self.credentials.create(
            user_id=user.id,
            credential_id=registered.credential_id,
            public_key=registered.public_key,
            counter=registered.counter,
            transports=registered.transports,
        )
        logger.info("Registered passkey %s for user %s", passkey.id, user.id)
        return passkey


class AuthenticationFlow:
    """Issue authentication challenges and verify assertions."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.credentials = CredentialRepository(db)

    def begin(self, user: User, web_session: WebSession, rp: RelyingParty) -> dict[str, Any]:
        """Return request options listing the reviewer's credentials.

        Raises:
            PasskeyRequiredError: If the reviewer has no registered passkeys.
        """
        passkeys = self.credentials.list_for_user(user.id)
        if not passkeys:
            raise PasskeyRequiredError("No passkeys registered")
        options, challenge = webauthn.generate_authentication_options(
            rp,
            allow=[stored_credential(passkey) for passkey in passkeys],
        )
        store_challenge(self.db, web_session, challenge)
        return options

    def verify(
        self,
        user: User,
        web_session: WebSession,
        rp: RelyingParty,
        response: Mapping[str, Any] | None,
    ) -> Passkey:
        """Verify an assertion against the session challenge.

        The assertion must name one of ``user``'s own credentials. On success
        the verifier-reported counter is written back unconditionally; on
        failure nothing is written.

        Raises:
            PasskeyRequiredError: If no assertion was supplied.
            PasskeyVerificationError: For any verification failure.
        """
        if not response:
            raise PasskeyRequiredError("Passkey authentication required")

        challenge = take_challenge(self.db, web_session)
        credential_id = response.get("id")
        passkey = (
            self.credentials.get_by_credential_id(credential_id)
            if isinstance(credential_id, str)
            else None
        )
        if passkey is None or passkey.user_id != user.id:
            logger.warning("Assertion from user %s named an unknown credential", user.id)
            raise PasskeyVerificationError()

        new_counter = webauthn.verify_authentication(
            rp,
            challenge=challenge,
            response=response,
            credential=stored_credential(passkey),
        )
        self.credentials.update_counter(passkey.id, new_counter)
        self.db.refresh(passkey)
        logger.info("Verified passkey %s for user %s", passkey.id, user.id)
        return passkey
