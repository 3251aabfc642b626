"""Credential Verification — tests for verify_credentials and the user lookup.

Tests cover:
    - registered email + correct password returns the Identity
    - wrong password, unregistered email and malformed input all return None
    - malformed input never touches the store
    - store failure raises CredentialLookupError (not None)
    - rejections are logged under the authentication category, without the reason
"""

import logging

import pytest
from sqlalchemy.exc import OperationalError

from invoice_desk.core.errors import CredentialLookupError
from invoice_desk.services import authenticate as authenticate_module
from invoice_desk.services.authenticate import verify_credentials
from invoice_desk.services.credential_store import get_user_by_email

USER_EMAIL = "user@nextmail.io"
USER_PASSWORD = "123456"


class _FailingSession:
    """Stands in for AsyncSession when the store is down."""

    def __init__(self):
        self.calls = 0

    async def execute(self, *args, **kwargs):
        self.calls += 1
        raise OperationalError("SELECT", {}, Exception("connection refused"))


async def test_correct_password_returns_identity(test_db, seed_user):
    identity = await verify_credentials(test_db, USER_EMAIL, USER_PASSWORD, dummy_rounds=4)
    assert identity is not None
    assert identity.id == seed_user.id
    assert identity.email == USER_EMAIL


async def test_wrong_password_is_rejected(test_db, seed_user):
    assert await verify_credentials(test_db, USER_EMAIL, "wrong-password", dummy_rounds=4) is None


async def test_unregistered_email_is_rejected(test_db, seed_user):
    assert await verify_credentials(
        test_db, "nobody@nextmail.io", USER_PASSWORD, dummy_rounds=4,
    ) is None


async def test_unregistered_email_still_runs_a_verification(test_db, monkeypatch):
    burned = []

    async def fake_burn(password, rounds):
        burned.append(rounds)

    monkeypatch.setattr(authenticate_module, "burn_verification", fake_burn)
    await verify_credentials(test_db, "nobody@nextmail.io", USER_PASSWORD, dummy_rounds=4)
    assert burned == [4]


@pytest.mark.parametrize("email, password", [
    ("not-an-email", USER_PASSWORD),
    (USER_EMAIL, "12345"),
    ("", ""),
])
async def test_malformed_input_rejected_without_store_access(email, password):
    session = _FailingSession()
    assert await verify_credentials(session, email, password) is None
    assert session.calls == 0


async def test_store_failure_raises_lookup_error():
    with pytest.raises(CredentialLookupError):
        await verify_credentials(_FailingSession(), USER_EMAIL, USER_PASSWORD)


async def test_lookup_returns_none_for_unknown_email(test_db):
    assert await get_user_by_email(test_db, "nobody@nextmail.io") is None


async def test_rejection_is_logged_as_authentication_category(test_db, seed_user, caplog):
    with caplog.at_level(logging.INFO, logger="invoice_desk.services.authenticate"):
        assert await verify_credentials(test_db, USER_EMAIL, "wrong-password") is None

    [record] = [r for r in caplog.records if r.getMessage() == "Invalid credentials"]
    assert record.category == "authentication"
