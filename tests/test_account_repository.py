"""
Smoke tests for the AccountRepository against a temporary SQLite database.
"""
from __future__ import annotations

import pytest

from userauth.core.errors import AccountValidationError
from userauth.repositories.account_repository import DuplicateEmailError


def _create(repo, email="alice@example.com", token="tok-1", **kw):
    return repo.create(email=email, password_hash="hash", verification_token=token, **kw)


def test_create_normalizes_email_and_applies_defaults(repo):
    account = _create(repo, email="  Alice@Example.COM ")

    assert account.id
    assert account.email == "alice@example.com"
    assert account.subscription == "starter"
    assert account.verified is False
    assert account.token is None
    assert repo.get_by_email("ALICE@example.com").id == account.id


def test_unique_email_is_enforced_by_the_store(repo):
    _create(repo)
    with pytest.raises(DuplicateEmailError):
        _create(repo, email="ALICE@example.com", token="tok-2")


def test_schema_validation(repo):
    with pytest.raises(AccountValidationError):
        _create(repo, email="not-an-email")
    with pytest.raises(AccountValidationError):
        _create(repo, email="")
    with pytest.raises(AccountValidationError):
        _create(repo, subscription="gold")


def test_mark_verified_clears_token(repo):
    account = _create(repo)
    assert repo.get_by_verification_token("tok-1").id == account.id

    assert repo.mark_verified(account.id, "tok-1") is True

    assert repo.get_by_verification_token("tok-1") is None
    stored = repo.get_by_id(account.id)
    assert stored.verified is True
    assert stored.verification_token is None


def test_mark_verified_consumes_token_once(repo):
    account = _create(repo)

    assert repo.mark_verified(account.id, "other-token") is False
    assert repo.get_by_id(account.id).verified is False

    assert repo.mark_verified(account.id, "tok-1") is True
    assert repo.mark_verified(account.id, "tok-1") is False


def test_session_token_slot_keeps_latest_write(repo):
    account = _create(repo)
    repo.set_token(account.id, "first")
    repo.set_token(account.id, "second")
    assert repo.get_by_id(account.id).token == "second"

    repo.set_token(account.id, None)
    assert repo.get_by_id(account.id).token is None


def test_update_subscription_validates_tier(repo):
    account = _create(repo)
    updated = repo.update_subscription(account.id, "business")
    assert updated.subscription == "business"

    with pytest.raises(AccountValidationError):
        repo.update_subscription(account.id, "platinum")
    assert repo.get_by_id(account.id).subscription == "business"
    assert repo.update_subscription("missing", "pro") is None


def test_blank_lookups_return_none(repo):
    assert repo.get_by_id("") is None
    assert repo.get_by_email("") is None
    assert repo.get_by_verification_token("") is None
