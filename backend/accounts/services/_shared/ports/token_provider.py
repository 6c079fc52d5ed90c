from __future__ import annotations

from typing import Any, Protocol

# Token type identifiers stamped in the ``type`` claim
ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


class TokenProvider(Protocol):
    """
    Port for minting and decoding signed tokens.

    Access and refresh tokens are signed with distinct secrets. Decoding
    raises :class:`~accounts.services._shared.errors.InvalidToken` or
    :class:`~accounts.services._shared.errors.TokenExpired`; it never
    returns claims for a token it could not fully verify.
    """

    def create_access_token(self, identity: int | str) -> str: ...

    def create_refresh_token(self, identity: int | str) -> str: ...

    def decode_access(self, token: str) -> dict[str, Any]: ...

    def decode_refresh(self, token: str) -> dict[str, Any]: ...
