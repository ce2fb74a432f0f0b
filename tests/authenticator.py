"""Software WebAuthn authenticator used to drive passkey ceremonies in tests.

It produces ``none`` attestations and ES256 assertions that ``fido2`` verifies
exactly as it would a hardware key's output.
"""

from __future__ import annotations

import hashlib
import json
import os
from typing import Any

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from fido2.cose import ES256
from fido2.utils import websafe_encode
from fido2.webauthn import (
    Aaguid,
    AttestationObject,
    AttestedCredentialData,
    AuthenticatorData,
)

TEST_ORIGIN = "http://test"
TEST_RP_ID = "test"


class SoftAuthenticator:
    """One P-256 credential with a signature counter."""

    def __init__(
        self,
        *,
        origin: str = TEST_ORIGIN,
        rp_id: str = TEST_RP_ID,
        counter: int = 0,
        transports: list[str] | None = None,
    ) -> None:
        self.origin = origin
        self.rp_id = rp_id
        self.counter = counter
        self.transports = transports if transports is not None else ["usb"]
        self.credential_id = os.urandom(32)
        self.private_key = ec.generate_private_key(ec.SECP256R1())
        self.cose_key = ES256.from_cryptography_key(self.private_key.public_key())

    @property
    def credential_id_b64(self) -> str:
        return websafe_encode(self.credential_id)

    def _client_data(self, kind: str, challenge: str, origin: str | None) -> bytes:
        return json.dumps(
            {
                "type": kind,
                "challenge": challenge,
                "origin": origin or self.origin,
                "crossOrigin": False,
            }
        ).encode()

    def _rp_id_hash(self, rp_id: str | None) -> bytes:
        return hashlib.sha256((rp_id or self.rp_id).encode()).digest()

    def register(
        self,
        challenge: str,
        *,
        origin: str | None = None,
        rp_id: str | None = None,
    ) -> dict[str, Any]:
        """Return a registration response JSON for ``challenge``."""
        credential_data = AttestedCredentialData.create(
            Aaguid.NONE,
            self.credential_id,
            self.cose_key,
        )
        flags = AuthenticatorData.FLAG.UP | AuthenticatorData.FLAG.UV | AuthenticatorData.FLAG.AT
        auth_data = AuthenticatorData.create(
            self._rp_id_hash(rp_id),
            flags,
            self.counter,
            credential_data,
        )
        attestation = AttestationObject.create("none", auth_data, {})
        return {
            "id": self.credential_id_b64,
            "rawId": self.credential_id_b64,
            "type": "public-key",
            "response": {
                "clientDataJSON": websafe_encode(
                    self._client_data("webauthn.create", challenge, origin)
                ),
                "attestationObject": websafe_encode(bytes(attestation)),
                "transports": list(self.transports),
            },
            "clientExtensionResults": {},
        }

    def assert_challenge(
        self,
        challenge: str,
        *,
        origin: str | None = None,
        rp_id: str | None = None,
        counter: int | None = None,
    ) -> dict[str, Any]:
        """Return an assertion JSON for ``challenge``.

        The counter advances by one unless ``counter`` pins the reported value.
        """
        if counter is None:
            self.counter += 1
            counter = self.counter
        flags = AuthenticatorData.FLAG.UP | AuthenticatorData.FLAG.UV
        auth_data = AuthenticatorData.create(self._rp_id_hash(rp_id), flags, counter)
        client_data = self._client_data("webauthn.get", challenge, origin)
        signature = self.private_key.sign(
            bytes(auth_data) + hashlib.sha256(client_data).digest(),
            ec.ECDSA(hashes.SHA256()),
        )
        return {
            "id": self.credential_id_b64,
            "rawId": self.credential_id_b64,
            "type": "public-key",
            "response": {
                "clientDataJSON": websafe_encode(client_data),
                "authenticatorData": websafe_encode(bytes(auth_data)),
                "signature": websafe_encode(signature),
            },
            "clientExtensionResults": {},
        }
