"""
TokenIssuer
===========

Mints an access/refresh pair for an identity and records the refresh token
as the identity's single live refresh token before handing anything out.
"""

from __future__ import annotations

import logging

from accounts.services._shared.errors import (
    CredentialStoreError,
    IdentityNotFound,
    InfrastructureFailure,
    TokenRevoked,
)
from accounts.services._shared.ports import CredentialStore, TokenProvider
from accounts.services.auth.dto import TokenPairOut

logger = logging.getLogger(__name__)


class TokenIssuer:
    """
    Issue token pairs bound to persisted state.

    :param tokens: Signing adapter.
    :param store: Credential store holding the live refresh token.
    """

    def __init__(self, tokens: TokenProvider, store: CredentialStore) -> None:
        self.tokens = tokens
        self.store = store

    def issue_token_pair(self, identity_id: int, *, replaces: str | None = None) -> TokenPairOut:
        """
        Mint and persist a new pair.

        With ``replaces`` set, the new refresh token is written only if the
        stored value still equals ``replaces`` (rotation); otherwise the
        stored value is overwritten (login).

        :param identity_id: Identity the tokens are minted for.
        :param replaces: Refresh token being rotated out, if any.
        :returns: The new pair; its refresh token is already persisted.
        :raises InfrastructureFailure: When the store write fails.
        :raises IdentityNotFound: When the identity record vanished.
        :raises TokenRevoked: When a concurrent rotation won the swap.
        """
        access = self.tokens.create_access_token(identity_id)
        refresh = self.tokens.create_refresh_token(identity_id)

        try:
            if replaces is None:
                stored = self.store.set_refresh_token(identity_id, refresh)
            else:
                stored = self.store.compare_and_set_refresh_token(
                    identity_id, expected=replaces, new=refresh
                )
        except CredentialStoreError as exc:
            logger.error(
                "auth.issue.store_failed",
                extra={"identity_id": identity_id, "reason": str(exc)},
            )
            raise InfrastructureFailure() from exc

        if not stored:
            if replaces is None:
                raise IdentityNotFound(status_code=401)
            # Either the record is gone or another rotation already consumed it
            if self._exists(identity_id):
                raise TokenRevoked()
            raise IdentityNotFound(status_code=401)

        return TokenPairOut(access_token=access, refresh_token=refresh)

    def _exists(self, identity_id: int) -> bool:
        try:
            return self.store.find_by_id(identity_id) is not None
        except CredentialStoreError as exc:
            raise InfrastructureFailure() from exc
