"""Unit tests for TokenVerifier (access check and refresh rotation)."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest
from accounts.services._shared.errors import (
    IdentityNotFound,
    InvalidToken,
    TokenExpired,
    TokenRevoked,
    Unauthenticated,
)
from accounts.services.auth.issuer import TokenIssuer
from accounts.services.auth.verifier import TokenVerifier

from tests.helpers.tokens import RacingStore, UntouchableStore, tamper_signature

pytestmark = pytest.mark.nodb


def _verifier(tokens, store):
    return TokenVerifier(tokens, store, TokenIssuer(tokens, store))


@pytest.fixture()
def alice(memory_store):
    return memory_store.add_user(username="alice", email="alice@example.com", password="s3cret!!")


@pytest.fixture()
def verifier(tokens, memory_store):
    return _verifier(tokens, memory_store)


# ------------------------------ Access ------------------------------------ #


class TestVerifyAccess:
    def test_returns_identity_of_issued_token(self, verifier, alice):
        pair = verifier.issuer.issue_token_pair(alice.id)
        assert verifier.verify_access(pair.access_token) == alice.id

    @pytest.mark.parametrize("token", [None, "", "   "])
    def test_absent_token(self, verifier, token):
        with pytest.raises(Unauthenticated):
            verifier.verify_access(token)

    def test_expired_is_deterministic(self, verifier, past_tokens, alice):
        token = past_tokens.create_access_token(alice.id)
        with pytest.raises(TokenExpired):
            verifier.verify_access(token)
        with pytest.raises(TokenExpired):
            verifier.verify_access(token)

    def test_tampered(self, verifier, tokens, alice):
        with pytest.raises(InvalidToken):
            verifier.verify_access(tamper_signature(tokens.create_access_token(alice.id)))

    def test_refresh_token_is_not_an_access_token(self, verifier, alice):
        pair = verifier.issuer.issue_token_pair(alice.id)
        with pytest.raises(InvalidToken):
            verifier.verify_access(pair.refresh_token)

    def test_non_numeric_subject(self, verifier, tokens):
        with pytest.raises(InvalidToken):
            verifier.verify_access(tokens.create_access_token("not-a-number"))

    def test_never_touches_the_store(self, tokens):
        verifier = _verifier(tokens, UntouchableStore())
        assert verifier.verify_access(tokens.create_access_token(5)) == 5

    def test_still_valid_after_logout(self, verifier, memory_store, alice):
        pair = verifier.issuer.issue_token_pair(alice.id)
        memory_store.set_refresh_token(alice.id, None)
        assert verifier.verify_access(pair.access_token) == alice.id


# ------------------------------ Refresh ----------------------------------- #


class TestRefresh:
    def test_rotates(self, verifier, memory_store, alice):
        v1 = verifier.issuer.issue_token_pair(alice.id)
        v2 = verifier.refresh(v1.refresh_token)

        assert v2.refresh_token != v1.refresh_token
        assert memory_store.find_by_id(alice.id).refresh_token == v2.refresh_token
        assert verifier.verify_access(v2.access_token) == alice.id

    def test_previous_token_is_revoked_after_rotation(self, verifier, alice):
        v1 = verifier.issuer.issue_token_pair(alice.id)
        verifier.refresh(v1.refresh_token)

        with pytest.raises(TokenRevoked):
            verifier.refresh(v1.refresh_token)

    def test_refresh_twice_then_reuse_first(self, verifier, alice):
        t1 = verifier.issuer.issue_token_pair(alice.id).refresh_token
        t2 = verifier.refresh(t1).refresh_token
        t3 = verifier.refresh(t2).refresh_token

        with pytest.raises(TokenRevoked):
            verifier.refresh(t1)
        # The failed reuse does not disturb the live token
        assert verifier.refresh(t3).refresh_token

    def test_after_logout(self, verifier, memory_store, alice):
        pair = verifier.issuer.issue_token_pair(alice.id)
        memory_store.set_refresh_token(alice.id, None)

        with pytest.raises(TokenRevoked):
            verifier.refresh(pair.refresh_token)

    def test_valid_signature_never_persisted(self, verifier, tokens, alice):
        # Minted correctly but never issued: persisted value is empty
        with pytest.raises(TokenRevoked):
            verifier.refresh(tokens.create_refresh_token(alice.id))

    @pytest.mark.parametrize("token", [None, "", " "])
    def test_absent(self, verifier, token):
        with pytest.raises(Unauthenticated):
            verifier.refresh(token)

    def test_expired(self, verifier, past_tokens, memory_store, alice):
        token = past_tokens.create_refresh_token(alice.id)
        memory_store.set_refresh_token(alice.id, token)

        with pytest.raises(TokenExpired):
            verifier.refresh(token)

    def test_tampered(self, verifier, alice):
        pair = verifier.issuer.issue_token_pair(alice.id)
        with pytest.raises(InvalidToken):
            verifier.refresh(tamper_signature(pair.refresh_token))

    def test_access_token_is_not_a_refresh_token(self, verifier, alice):
        pair = verifier.issuer.issue_token_pair(alice.id)
        with pytest.raises(InvalidToken):
            verifier.refresh(pair.access_token)

    def test_identity_gone(self, verifier, memory_store, alice):
        pair = verifier.issuer.issue_token_pair(alice.id)
        memory_store.delete_user(alice.id)

        with pytest.raises(IdentityNotFound) as excinfo:
            verifier.refresh(pair.refresh_token)
        assert excinfo.value.status_code == 401

    def test_expired_access_then_refresh(self, verifier, past_tokens, alice):
        pair = verifier.issuer.issue_token_pair(alice.id)
        with pytest.raises(TokenExpired):
            verifier.verify_access(past_tokens.create_access_token(alice.id))

        renewed = verifier.refresh(pair.refresh_token)
        assert verifier.verify_access(renewed.access_token) == alice.id


def test_concurrent_refresh_has_exactly_one_winner(tokens):
    store = RacingStore(parties=2)
    user = store.add_user(username="carol", email="carol@example.com", password="s3cret!!")
    verifier = _verifier(tokens, store)
    token = tokens.create_refresh_token(user.id)
    store.set_refresh_token(user.id, token)

    def attempt():
        try:
            return verifier.refresh(token)
        except TokenRevoked as exc:
            return exc

    with ThreadPoolExecutor(max_workers=2) as pool:
        results = list(pool.map(lambda _: attempt(), range(2)))

    winners = [r for r in results if not isinstance(r, TokenRevoked)]
    assert len(winners) == 1
    assert store.find_by_id(user.id).refresh_token == winners[0].refresh_token
