# accounts/infra/jwt/pyjwt_token_provider.py
from __future__ import annotations

import uuid
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from accounts.services._shared.errors import InvalidToken, TokenExpired
from accounts.services._shared.ports import (
    ACCESS_TOKEN_TYPE,
    REFRESH_TOKEN_TYPE,
    TokenProvider,
)
from accounts.services.auth.dto import TokenConfig

REQUIRED_CLAIMS = ["exp", "iat", "sub", "type"]


def _utcnow() -> datetime:
    return datetime.now(UTC)


class PyJWTTokenProvider(TokenProvider):
    """
    Adapter signing and verifying HMAC JWTs with PyJWT.

    Access and refresh tokens use separate secrets, so a token of one kind
    never verifies as the other. No Flask context is needed.

    :param config: Frozen token configuration.
    :param clock: Returns the current aware UTC time used when minting.
    """

    def __init__(
        self, config: TokenConfig, *, clock: Callable[[], datetime] = _utcnow
    ) -> None:
        self.config = config
        self._clock = clock

    # ------------------------------ Minting ------------------------------ #

    def _encode(
        self, identity: int | str, *, token_type: str, secret: str, expires: timedelta
    ) -> str:
        now = self._clock()
        payload: dict[str, Any] = {
            "sub": str(identity),
            "iat": now,
            "exp": now + expires,
            "jti": uuid.uuid4().hex,
            "type": token_type,
        }
        if self.config.issuer:
            payload["iss"] = self.config.issuer
        return jwt.encode(payload, secret, algorithm=self.config.algorithm)

    def create_access_token(self, identity: int | str) -> str:
        return self._encode(
            identity,
            token_type=ACCESS_TOKEN_TYPE,
            secret=self.config.access_secret,
            expires=self.config.access_expires,
        )

    def create_refresh_token(self, identity: int | str) -> str:
        return self._encode(
            identity,
            token_type=REFRESH_TOKEN_TYPE,
            secret=self.config.refresh_secret,
            expires=self.config.refresh_expires,
        )

    # ------------------------------ Decoding ----------------------------- #

    def _decode(self, token: str, *, token_type: str, secret: str) -> dict[str, Any]:
        # PyJWT verifies the signature before any registered claim.
        try:
            claims: dict[str, Any] = jwt.decode(
                token,
                secret,
                algorithms=[self.config.algorithm],
                issuer=self.config.issuer,
                leeway=self.config.leeway,
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpired() from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidToken() from exc

        if claims.get("type") != token_type or not claims.get("sub"):
            raise InvalidToken()
        return claims

    def decode_access(self, token: str) -> dict[str, Any]:
        return self._decode(
            token, token_type=ACCESS_TOKEN_TYPE, secret=self.config.access_secret
        )

    def decode_refresh(self, token: str) -> dict[str, Any]:
        return self._decode(
            token, token_type=REFRESH_TOKEN_TYPE, secret=self.config.refresh_secret
        )
