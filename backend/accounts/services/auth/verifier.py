"""
TokenVerifier
=============

Authorization gate for presented tokens.

- ``verify_access`` is stateless: signature and expiry only.
- ``refresh`` is stateful: the presented refresh token must equal the one
  persisted for its identity, and is rotated out on success.
"""

from __future__ import annotations

import hmac
from typing import Any

from accounts.services._shared.errors import (
    CredentialStoreError,
    IdentityNotFound,
    InfrastructureFailure,
    InvalidToken,
    TokenRevoked,
    Unauthenticated,
)
from accounts.services._shared.ports import CredentialStore, TokenProvider
from accounts.services.auth.dto import TokenPairOut
from accounts.services.auth.issuer import TokenIssuer


def _subject_id(claims: dict[str, Any]) -> int:
    try:
        return int(claims["sub"])
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidToken() from exc


class TokenVerifier:
    """
    Verify access tokens and rotate refresh tokens.

    :param tokens: Signing adapter.
    :param store: Credential store holding the live refresh token.
    :param issuer: Issuer used to mint the replacement pair.
    """

    def __init__(self, tokens: TokenProvider, store: CredentialStore, issuer: TokenIssuer) -> None:
        self.tokens = tokens
        self.store = store
        self.issuer = issuer

    def verify_access(self, token: str | None) -> int:
        """
        Resolve an access token to its identity id.

        :raises Unauthenticated: No token presented.
        :raises InvalidToken: Malformed, wrong kind, or bad signature.
        :raises TokenExpired: Past its ``exp``.
        """
        if not token or not token.strip():
            raise Unauthenticated()
        claims = self.tokens.decode_access(token.strip())
        return _subject_id(claims)

    def refresh(self, token: str | None) -> TokenPairOut:
        """
        Exchange a live refresh token for a new pair.

        :raises Unauthenticated: No token presented.
        :raises InvalidToken: Malformed, wrong kind, or bad signature.
        :raises TokenExpired: Past its ``exp``.
        :raises IdentityNotFound: Subject no longer exists (status 401).
        :raises TokenRevoked: Not the persisted token (rotated or logged out).
        :raises InfrastructureFailure: Store unavailable.
        """
        if not token or not token.strip():
            raise Unauthenticated()
        presented = token.strip()
        identity_id = _subject_id(self.tokens.decode_refresh(presented))

        try:
            identity = self.store.find_by_id(identity_id)
        except CredentialStoreError as exc:
            raise InfrastructureFailure() from exc
        if identity is None:
            raise IdentityNotFound("Invalid refresh token", status_code=401)

        stored = identity.refresh_token or ""
        if not stored or not hmac.compare_digest(stored.encode(), presented.encode()):
            raise TokenRevoked()

        return self.issuer.issue_token_pair(identity_id, replaces=presented)
