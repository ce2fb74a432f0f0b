"""WebAuthn ceremonies backed by the fido2 library.

This module is the only place that talks to ``fido2``. It builds a
``Fido2Server`` per ceremony for the relying party derived from the inbound
request, turns the library's options into JSON-ready dictionaries, and
collapses every verification failure into :class:`PasskeyVerificationError`.

Challenges are returned as URL-safe base64 strings; callers store them on the
session and hand them back unchanged for the matching verify step.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from fido2 import cbor
from fido2.cose import CoseKey
from fido2.server import Fido2Server
from fido2.utils import websafe_decode, websafe_encode
from fido2.webauthn import (
    Aaguid,
    AttestationConveyancePreference,
    AttestedCredentialData,
    AuthenticationResponse,
    AuthenticatorAttachment,
    AuthenticatorTransport,
    PublicKeyCredentialDescriptor,
    PublicKeyCredentialRpEntity,
    PublicKeyCredentialType,
    PublicKeyCredentialUserEntity,
    RegistrationResponse,
    ResidentKeyRequirement,
    UserVerificationRequirement,
)

from videovault.core.settings import settings
from videovault.services.errors import PasskeyVerificationError

logger = logging.getLogger(__name__)

_KNOWN_TRANSPORTS = frozenset(transport.value for transport in AuthenticatorTransport)


@dataclass(frozen=True)
class RelyingParty:
    """The (rp_id, origin) pair a ceremony is scoped to."""

    rp_id: str
    origin: str
    name: str = field(default_factory=lambda: settings.rp_name)

    def verify_origin(self, origin: str) -> bool:
        return origin == self.origin

    def server(self) -> Fido2Server:
        server = Fido2Server(
            PublicKeyCredentialRpEntity(name=self.name, id=self.rp_id),
            attestation=AttestationConveyancePreference.NONE,
            verify_origin=self.verify_origin,
        )
        server.timeout = settings.webauthn_timeout_ms
        return server


@dataclass(frozen=True)
class StoredCredential:
    """Credential material the verifier needs, detached from the ORM row."""

    credential_id: str
    public_key: bytes
    counter: int
    transports: list[str] = field(default_factory=list)

    def descriptor(self) -> PublicKeyCredentialDescriptor:
        transports = [
            AuthenticatorTransport(item) for item in self.transports if item in _KNOWN_TRANSPORTS
        ]
        return PublicKeyCredentialDescriptor(
            type=PublicKeyCredentialType.PUBLIC_KEY,
            id=websafe_decode(self.credential_id),
            transports=transports or None,
        )

    def attested_data(self) -> AttestedCredentialData:
        return AttestedCredentialData.create(
            Aaguid.NONE,
            websafe_decode(self.credential_id),
            CoseKey.parse(cbor.decode(self.public_key)),
        )


@dataclass(frozen=True)
class RegisteredCredential:
    """Outcome of a successful registration ceremony."""

    credential_id: str
    public_key: bytes
    counter: int
    transports: list[str]


def resolve_relying_party(
    host: str | None,
    forwarded_proto: str | None = None,
    scheme: str | None = None,
) -> RelyingParty:
    """Derive the relying party from request headers.

    ``RP_ID`` and ``RP_ORIGIN`` settings take precedence. Otherwise the rp id
    is the host without its port and the origin is ``{proto}://{host}``, where
    proto comes from ``X-Forwarded-Proto``, then the request scheme, then https.
    """
    effective_host = host or "localhost"
    proto = (forwarded_proto or "").split(",")[0].strip() or scheme or "https"
    rp_id = settings.rp_id or effective_host.split(":")[0]
    origin = settings.rp_origin or f"{proto}://{effective_host}"
    return RelyingParty(rp_id=rp_id, origin=origin)


def _json_safe(value: Any) -> Any:
    """Recursively turn option values into JSON-ready data, bytes as base64url."""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return websafe_encode(bytes(value))
    if isinstance(value, Mapping):
        return {key: _json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(item) for item in value]
    return value


def _expected_state(challenge: str | None, detail: str | None = None) -> dict[str, Any]:
    if not challenge:
        raise PasskeyVerificationError(detail) if detail else PasskeyVerificationError()
    return {
        "challenge": challenge,
        "user_verification": UserVerificationRequirement.REQUIRED,
    }


def generate_registration_options(
    rp: RelyingParty,
    *,
    user_id: str,
    user_name: str,
    display_name: str,
    exclude: Sequence[StoredCredential] = (),
) -> tuple[dict[str, Any], str]:
    """Return ``(options, challenge)`` for a discoverable, user-verified credential."""
    options, state = rp.server().register_begin(
        PublicKeyCredentialUserEntity(
            name=user_name,
            id=user_id.encode(),
            display_name=display_name,
        ),
        credentials=[credential.descriptor() for credential in exclude],
        resident_key_requirement=ResidentKeyRequirement.REQUIRED,
        user_verification=UserVerificationRequirement.REQUIRED,
        authenticator_attachment=AuthenticatorAttachment.CROSS_PLATFORM,
    )
    return _json_safe(options.public_key), state["challenge"]


def verify_registration(
    rp: RelyingParty,
    *,
    challenge: str | None,
    response: Mapping[str, Any],
) -> RegisteredCredential:
    """Verify an attestation response against the expected challenge.

    Raises:
        PasskeyVerificationError: For any malformed or mismatching response.
    """
    state = _expected_state(challenge, "Verification failed")
    try:
        registration = RegistrationResponse.from_dict(response)
        auth_data = rp.server().register_complete(state, response=registration)
    except Exception as err:
        logger.warning("Registration verification failed for rp %s: %s", rp.rp_id, err)
        raise PasskeyVerificationError("Verification failed") from err

    credential_data = auth_data.credential_data
    if credential_data is None:
        logger.warning("Registration for rp %s carried no credential data", rp.rp_id)
        raise PasskeyVerificationError("Verification failed")

    raw_transports = response.get("response", {}).get("transports") or []
    transports = [item for item in raw_transports if isinstance(item, str) and item]
    return RegisteredCredential(
        credential_id=websafe_encode(credential_data.credential_id),
        public_key=cbor.encode(credential_data.public_key),
        counter=auth_data.counter,
        transports=transports,
    )


def generate_authentication_options(
    rp: RelyingParty,
    *,
    allow: Sequence[StoredCredential],
) -> tuple[dict[str, Any], str]:
    """Return ``(options, challenge)`` restricted to the given credentials."""
    options, state = rp.server().authenticate_begin(
        credentials=[credential.descriptor() for credential in allow],
        user_verification=UserVerificationRequirement.REQUIRED,
    )
    return _json_safe(options.public_key), state["challenge"]


def check_counter(stored: int, reported: int) -> None:
    """Reject a counter that did not advance, unless both sides stay at zero.

    Authenticators that do not implement a counter always report 0, and only
    that 0 -> 0 case is accepted unchanged. A nonzero counter reported equal
    to the stored value is treated as a possible cloned authenticator and
    refused, so "numerically unchanged" counters pass only when counterless.
    """
    if (reported > 0 or stored > 0) and reported <= stored:
        raise ValueError(
            f"Signature counter did not increase (stored {stored}, reported {reported})"
        )


def verify_authentication(
    rp: RelyingParty,
    *,
    challenge: str | None,
    response: Mapping[str, Any],
    credential: StoredCredential,
) -> int:
    """Verify an assertion made with ``credential`` and return its new counter.

    Raises:
        PasskeyVerificationError: For any malformed or mismatching response,
            including a signature counter that went backwards.
    """
    state = _expected_state(challenge)
    try:
        assertion = AuthenticationResponse.from_dict(response)
        rp.server().authenticate_complete(
            state,
            [credential.attested_data()],
            response=assertion,
        )
        new_counter = assertion.response.authenticator_data.counter
        check_counter(credential.counter, new_counter)
    except Exception as err:
        logger.warning(
            "Authentication verification failed for credential %s: %s",
            credential.credential_id,
            err,
        )
        raise PasskeyVerificationError() from err
    return new_counter
