"""Unit tests for TokenIssuer against the in-memory credential store."""

from __future__ import annotations

import pytest
from accounts.services._shared.errors import (
    IdentityNotFound,
    InfrastructureFailure,
    TokenRevoked,
)
from accounts.services.auth.issuer import TokenIssuer

from tests.helpers.tokens import UnavailableStore

pytestmark = pytest.mark.nodb


@pytest.fixture()
def alice(memory_store):
    return memory_store.add_user(username="alice", email="alice@example.com", password="s3cret!!")


@pytest.fixture()
def issuer(tokens, memory_store):
    return TokenIssuer(tokens, memory_store)


def test_issue_persists_refresh_token(issuer, tokens, memory_store, alice):
    pair = issuer.issue_token_pair(alice.id)

    assert memory_store.find_by_id(alice.id).refresh_token == pair.refresh_token
    assert tokens.decode_access(pair.access_token)["sub"] == str(alice.id)
    assert tokens.decode_refresh(pair.refresh_token)["sub"] == str(alice.id)


def test_issue_overwrites_previous_refresh_token(issuer, memory_store, alice):
    first = issuer.issue_token_pair(alice.id)
    second = issuer.issue_token_pair(alice.id)

    assert first.refresh_token != second.refresh_token
    assert memory_store.find_by_id(alice.id).refresh_token == second.refresh_token


def test_rotation_swaps_expected_token(issuer, memory_store, alice):
    first = issuer.issue_token_pair(alice.id)
    second = issuer.issue_token_pair(alice.id, replaces=first.refresh_token)

    assert memory_store.find_by_id(alice.id).refresh_token == second.refresh_token


def test_rotation_lost_race_is_revoked(issuer, memory_store, alice):
    first = issuer.issue_token_pair(alice.id)
    issuer.issue_token_pair(alice.id, replaces=first.refresh_token)

    with pytest.raises(TokenRevoked):
        issuer.issue_token_pair(alice.id, replaces=first.refresh_token)


def test_unknown_identity(issuer):
    with pytest.raises(IdentityNotFound) as excinfo:
        issuer.issue_token_pair(999)
    assert excinfo.value.status_code == 401


def test_rotation_for_deleted_identity(issuer, memory_store, alice):
    first = issuer.issue_token_pair(alice.id)
    memory_store.delete_user(alice.id)

    with pytest.raises(IdentityNotFound):
        issuer.issue_token_pair(alice.id, replaces=first.refresh_token)


def test_store_failure_surfaces_no_tokens(tokens):
    store = UnavailableStore()
    user = store.add_user(username="bob", email="bob@example.com", password="s3cret!!")

    with pytest.raises(InfrastructureFailure) as excinfo:
        TokenIssuer(tokens, store).issue_token_pair(user.id)

    assert excinfo.value.status_code == 500
    assert store.find_by_id(user.id).refresh_token is None
