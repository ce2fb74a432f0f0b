# tests/services/test_webauthn_adapter.py
"""Tests for the fido2-backed ceremony adapter."""

from __future__ import annotations

import pytest

from authenticator import SoftAuthenticator
from videovault.core.settings import settings
from videovault.services import webauthn
from videovault.services.errors import PasskeyVerificationError
from videovault.services.webauthn import RelyingParty, StoredCredential

RP = RelyingParty(rp_id="test", origin="http://test")


def _register(key: SoftAuthenticator) -> StoredCredential:
    _options, challenge = webauthn.generate_registration_options(
        RP,
        user_id="user-1",
        user_name="vera",
        display_name="Vera",
    )
    registered = webauthn.verify_registration(
        RP,
        challenge=challenge,
        response=key.register(challenge),
    )
    return StoredCredential(
        credential_id=registered.credential_id,
        public_key=registered.public_key,
        counter=registered.counter,
        transports=registered.transports,
    )


def test_resolve_relying_party_from_host_headers(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "rp_id", None)
    monkeypatch.setattr(settings, "rp_origin", None)

    rp = webauthn.resolve_relying_party("vault.example:8443", "https", "http")

    assert rp.rp_id == "vault.example"
    assert rp.origin == "https://vault.example:8443"


def test_resolve_relying_party_falls_back_to_scheme_then_https(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(settings, "rp_id", None)
    monkeypatch.setattr(settings, "rp_origin", None)

    assert webauthn.resolve_relying_party("a.example", None, "http").origin == "http://a.example"
    assert webauthn.resolve_relying_party("a.example").origin == "https://a.example"
    assert webauthn.resolve_relying_party(None).rp_id == "localhost"


def test_resolve_relying_party_honours_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "rp_id", "vault.example")
    monkeypatch.setattr(settings, "rp_origin", "https://vault.example")

    rp = webauthn.resolve_relying_party("10.0.0.4:8000", None, "http")

    assert rp == RelyingParty(rp_id="vault.example", origin="https://vault.example")


def test_registration_options_require_resident_key_and_user_verification() -> None:
    existing = _register(SoftAuthenticator())

    options, challenge = webauthn.generate_registration_options(
        RP,
        user_id="user-1",
        user_name="vera",
        display_name="Vera",
        exclude=[existing],
    )

    assert options["challenge"] == challenge
    assert options["rp"]["id"] == "test"
    selection = options["authenticatorSelection"]
    assert selection["residentKey"] == "required"
    assert selection["userVerification"] == "required"
    assert [item["id"] for item in options["excludeCredentials"]] == [existing.credential_id]


def test_each_ceremony_gets_a_fresh_challenge() -> None:
    _, first = webauthn.generate_authentication_options(RP, allow=[])
    _, second = webauthn.generate_authentication_options(RP, allow=[])
    assert first != second


def test_verify_registration_returns_credential_material() -> None:
    key = SoftAuthenticator(transports=["usb", "nfc"])

    credential = _register(key)

    assert credential.credential_id == key.credential_id_b64
    assert credential.counter == 0
    assert credential.transports == ["usb", "nfc"]


@pytest.mark.parametrize(
    "tamper",
    [
        {"origin": "https://evil.example"},
        {"rp_id": "evil.example"},
    ],
)
def test_verify_registration_rejects_foreign_context(tamper: dict[str, str]) -> None:
    key = SoftAuthenticator()
    _, challenge = webauthn.generate_registration_options(
        RP,
        user_id="user-1",
        user_name="vera",
        display_name="Vera",
    )

    with pytest.raises(PasskeyVerificationError) as excinfo:
        webauthn.verify_registration(
            RP,
            challenge=challenge,
            response=key.register(challenge, **tamper),
        )
    assert excinfo.value.detail == "Verification failed"


def test_verify_registration_rejects_other_challenge() -> None:
    key = SoftAuthenticator()
    _, issued = webauthn.generate_registration_options(
        RP,
        user_id="user-1",
        user_name="vera",
        display_name="Vera",
    )
    _, other = webauthn.generate_registration_options(
        RP,
        user_id="user-1",
        user_name="vera",
        display_name="Vera",
    )

    with pytest.raises(PasskeyVerificationError):
        webauthn.verify_registration(RP, challenge=issued, response=key.register(other))


def test_verify_without_stored_challenge_fails() -> None:
    key = SoftAuthenticator()
    with pytest.raises(PasskeyVerificationError):
        webauthn.verify_registration(RP, challenge=None, response=key.register("AAAA"))


def test_verify_authentication_returns_new_counter() -> None:
    key = SoftAuthenticator()
    credential = _register(key)
    _, challenge = webauthn.generate_authentication_options(RP, allow=[credential])

    counter = webauthn.verify_authentication(
        RP,
        challenge=challenge,
        response=key.assert_challenge(challenge),
        credential=credential,
    )

    assert counter == 1


def test_verify_authentication_rejects_bad_signature() -> None:
    key = SoftAuthenticator()
    credential = _register(key)
    impostor = SoftAuthenticator()
    impostor.credential_id = key.credential_id
    _, challenge = webauthn.generate_authentication_options(RP, allow=[credential])

    with pytest.raises(PasskeyVerificationError) as excinfo:
        webauthn.verify_authentication(
            RP,
            challenge=challenge,
            response=impostor.assert_challenge(challenge),
            credential=credential,
        )
    assert excinfo.value.detail == "Passkey verification failed"


def test_verify_authentication_rejects_counter_regression() -> None:
    key = SoftAuthenticator()
    credential = _register(key)
    stored = StoredCredential(
        credential_id=credential.credential_id,
        public_key=credential.public_key,
        counter=7,
    )
    _, challenge = webauthn.generate_authentication_options(RP, allow=[stored])

    with pytest.raises(PasskeyVerificationError):
        webauthn.verify_authentication(
            RP,
            challenge=challenge,
            response=key.assert_challenge(challenge, counter=7),
            credential=stored,
        )


def test_verify_authentication_accepts_counterless_authenticator() -> None:
    key = SoftAuthenticator()
    credential = _register(key)
    _, challenge = webauthn.generate_authentication_options(RP, allow=[credential])

    counter = webauthn.verify_authentication(
        RP,
        challenge=challenge,
        response=key.assert_challenge(challenge, counter=0),
        credential=credential,
    )

    assert counter == 0


@pytest.mark.parametrize(
    ("stored", "reported", "ok"),
    [
        (0, 0, True),
        (0, 1, True),
        (4, 5, True),
        (5, 5, False),
        (5, 3, False),
        (5, 0, False),
    ],
)
def test_check_counter(stored: int, reported: int, ok: bool) -> None:
    if ok:
        webauthn.check_counter(stored, reported)
    else:
        with pytest.raises(ValueError):
            webauthn.check_counter(stored, reported)


def test_descriptor_drops_unknown_transports() -> None:
    credential = StoredCredential(
        credential_id=SoftAuthenticator().credential_id_b64,
        public_key=b"",
        counter=0,
        transports=["usb", "carrier-pigeon"],
    )
    assert list(credential.descriptor().transports or []) == ["usb"]
