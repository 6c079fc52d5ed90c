"""Unit tests for PyJWTTokenProvider."""

from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime, timedelta

import jwt
import pytest
from accounts.infra.jwt import PyJWTTokenProvider
from accounts.services._shared.errors import InvalidToken, TokenExpired

from tests.helpers.tokens import tamper_signature

pytestmark = pytest.mark.nodb


class TestMinting:
    def test_access_token_claims(self, tokens):
        claims = tokens.decode_access(tokens.create_access_token(42))
        assert claims["sub"] == "42"
        assert claims["type"] == "access"
        assert claims["exp"] > claims["iat"]
        assert claims["jti"]

    def test_refresh_token_claims(self, tokens, token_config):
        claims = tokens.decode_refresh(tokens.create_refresh_token(42))
        assert claims["sub"] == "42"
        assert claims["type"] == "refresh"
        assert claims["exp"] - claims["iat"] == int(token_config.refresh_expires.total_seconds())

    def test_tokens_minted_in_the_same_second_differ(self, token_config):
        frozen = datetime(2030, 1, 1, tzinfo=UTC)
        provider = PyJWTTokenProvider(token_config, clock=lambda: frozen)
        assert provider.create_refresh_token(1) != provider.create_refresh_token(1)
        assert provider.create_access_token(1) != provider.create_access_token(1)

    def test_issuer_is_stamped_when_configured(self, token_config):
        provider = PyJWTTokenProvider(replace(token_config, issuer="accounts-api"))
        assert provider.decode_access(provider.create_access_token(3))["iss"] == "accounts-api"


class TestDecoding:
    def test_kinds_are_not_interchangeable(self, tokens):
        with pytest.raises(InvalidToken):
            tokens.decode_access(tokens.create_refresh_token(1))
        with pytest.raises(InvalidToken):
            tokens.decode_refresh(tokens.create_access_token(1))

    def test_expired_access_token_is_rejected_every_time(self, tokens, past_tokens):
        token = past_tokens.create_access_token(7)
        for _ in range(3):
            with pytest.raises(TokenExpired):
                tokens.decode_access(token)

    def test_expired_refresh_token(self, tokens, past_tokens):
        with pytest.raises(TokenExpired):
            tokens.decode_refresh(past_tokens.create_refresh_token(7))

    def test_tampered_signature(self, tokens):
        with pytest.raises(InvalidToken):
            tokens.decode_access(tamper_signature(tokens.create_access_token(7)))
        with pytest.raises(InvalidToken):
            tokens.decode_refresh(tamper_signature(tokens.create_refresh_token(7)))

    def test_tampered_expired_token_reports_invalid_not_expired(self, tokens, past_tokens):
        with pytest.raises(InvalidToken):
            tokens.decode_access(tamper_signature(past_tokens.create_access_token(7)))

    @pytest.mark.parametrize("garbage", ["", "abc", "a.b.c", "not a jwt at all"])
    def test_malformed(self, tokens, garbage):
        with pytest.raises(InvalidToken):
            tokens.decode_access(garbage)

    def test_foreign_secret(self, tokens, token_config):
        other = PyJWTTokenProvider(
            replace(
                token_config,
                access_secret="someone-else-access-0123456789abcdef",
                refresh_secret="someone-else-refresh-0123456789abcdef",
            )
        )
        with pytest.raises(InvalidToken):
            tokens.decode_access(other.create_access_token(1))

    def test_wrong_issuer(self, token_config):
        minted = PyJWTTokenProvider(replace(token_config, issuer="elsewhere"))
        checking = PyJWTTokenProvider(replace(token_config, issuer="accounts-api"))
        with pytest.raises(InvalidToken):
            checking.decode_access(minted.create_access_token(1))

    def test_missing_type_claim(self, tokens, token_config):
        now = datetime.now(UTC)
        token = jwt.encode(
            {"sub": "1", "iat": now, "exp": now + timedelta(minutes=5)},
            token_config.access_secret,
            algorithm="HS256",
        )
        with pytest.raises(InvalidToken):
            tokens.decode_access(token)

    def test_leeway_accepts_slightly_expired(self, token_config):
        clock = lambda: datetime.now(UTC) - token_config.access_expires - timedelta(seconds=5)  # noqa: E731
        minted = PyJWTTokenProvider(token_config, clock=clock)
        tolerant = PyJWTTokenProvider(replace(token_config, leeway=60))
        assert tolerant.decode_access(minted.create_access_token(9))["sub"] == "9"
