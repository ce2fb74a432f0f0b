# tests/repositories/test_credential_repo.py
from __future__ import annotations

from sqlalchemy.orm import Session

from videovault.models import User
from videovault.repositories import CredentialRepository


def test_create_lookup_and_counter_update(db_session: Session, vip: User) -> None:
    repo = CredentialRepository(db_session)

    passkey = repo.create(
        user_id=vip.id,
        credential_id="cred-1",
        public_key=b"\xa1\x01\x02",
        counter=3,
        transports=["usb", "nfc"],
    )
    repo.update_counter(passkey.id, 9)
    db_session.expire_all()

    found = repo.get_by_credential_id("cred-1")
    assert found is not None
    assert found.counter == 9
    assert found.transport_list == ["usb", "nfc"]
    assert [item.id for item in repo.list_for_user(vip.id)] == [passkey.id]
    assert repo.get_by_credential_id("cred-2") is None
