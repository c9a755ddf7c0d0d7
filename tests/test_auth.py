from __future__ import annotations

import pytest
from fastapi import HTTPException

from auth import security, service


def test_hash_and_verify_password():
    hashed = security.hash_password("s3cret")

    assert security.verify_password("s3cret", hashed)
    assert not security.verify_password("wrong", hashed)


def test_verify_password_tolerates_bad_input():
    assert not security.verify_password("", "whatever")
    assert not security.verify_password("s3cret", "")
    assert not security.verify_password("s3cret", "not-a-bcrypt-hash")


def test_hash_password_rejects_empty():
    with pytest.raises(security.AuthSecurityError):
        security.hash_password("")


async def test_authenticate_returns_principal_with_roles(user_store):
    principal = await service.authenticate("sarah1", "password")

    assert principal.username == "sarah1"
    assert principal.has_role("CARD-OWNER")
    assert not principal.has_role("NON-OWNER")


@pytest.mark.parametrize(
    ("username", "password"),
    [("BAD-USER", "password"), ("sarah1", "BAD-PASSWORD"), ("retired", "password")],
)
async def test_authenticate_failures_are_401_with_challenge(user_store, username, password):
    with pytest.raises(HTTPException) as excinfo:
        await service.authenticate(username, password)

    assert excinfo.value.status_code == 401
    assert excinfo.value.headers == {"WWW-Authenticate": 'Basic realm="cashcards"'}


async def test_authentication_never_logs_password(user_store, caplog):
    caplog.set_level("INFO", logger="auth.service")

    with pytest.raises(HTTPException):
        await service.authenticate("sarah1", "hunter2-not-it")

    assert "hunter2-not-it" not in caplog.text
    assert "reason=bad_password" in caplog.text


async def test_unknown_user_still_runs_a_password_check(user_store, monkeypatch):
    checked: list[str] = []
    real_verify = security.verify_password

    def recording_verify(plain_password: str, password_hash: str) -> bool:
        checked.append(password_hash)
        return real_verify(plain_password, password_hash)

    monkeypatch.setattr(security, "verify_password", recording_verify)

    with pytest.raises(HTTPException):
        await service.authenticate("nobody-here", "password")

    assert checked == [security.dummy_password_hash()]


def test_dummy_password_hash_is_stable_and_matches_nothing():
    dummy = security.dummy_password_hash()

    assert dummy == security.dummy_password_hash()
    assert dummy.startswith("$2")
    assert not security.verify_password("password", dummy)


async def test_principal_carries_identity_and_roles_only(user_store):
    principal = await service.authenticate("kumar2", "password")

    assert principal.model_dump() == {"id": 2, "username": "kumar2", "roles": frozenset({"CARD-OWNER"})}
