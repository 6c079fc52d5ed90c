from __future__ import annotations

import logging

from accounts.services._shared.base import BaseService
from accounts.services._shared.errors import (
    AuthError,
    CredentialMismatch,
    CredentialStoreError,
    IdentityNotFound,
    InfrastructureFailure,
    ServiceError,
)
from accounts.services._shared.ports import CredentialStore, TokenProvider
from accounts.services.auth.dto import LoginIn, LoginOut, RefreshIn, TokenPairOut
from accounts.services.auth.issuer import TokenIssuer
from accounts.services.auth.verifier import TokenVerifier

logger = logging.getLogger(__name__)


class AuthService(BaseService):
    """
    Authentication lifecycle service (login / refresh / logout / authorize).

    Tokens are minted and decoded through a pluggable :class:`TokenProvider`;
    the one live refresh token per identity is kept in a
    :class:`CredentialStore`. Token and password values are never logged.
    """

    def __init__(
        self,
        *,
        token_provider: TokenProvider,
        credential_store: CredentialStore,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param token_provider: Adapter for issuing/decoding JWTs.
        :param credential_store: Users, password checks and refresh token state.
        """
        super().__init__()
        self.tokens = token_provider
        self.store = credential_store
        self.issuer = TokenIssuer(token_provider, credential_store)
        self.verifier = TokenVerifier(token_provider, credential_store, self.issuer)

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> LoginOut:
        """
        Authenticate credentials and issue a fresh token pair.

        Any refresh token issued earlier for the identity stops being accepted.

        :param dto: Login input.
        :returns: Identity plus token pair.
        :raises ServiceError: Neither username nor email given.
        :raises IdentityNotFound: No matching user.
        :raises CredentialMismatch: Wrong password.
        """
        if not (dto.username or "").strip() and not (dto.email or "").strip():
            raise ServiceError("username or email is required")

        try:
            identity = self.store.find_by_username_or_email(dto.username, dto.email)
            matches = identity is not None and self.store.verify_password(identity, dto.password)
        except CredentialStoreError as exc:
            raise InfrastructureFailure() from exc

        if identity is None:
            logger.warning("auth.login.rejected", extra={"reason": IdentityNotFound.code})
            raise IdentityNotFound()
        if not matches:
            logger.warning(
                "auth.login.rejected",
                extra={"identity_id": identity.id, "reason": CredentialMismatch.code},
            )
            raise CredentialMismatch()

        pair = self.issuer.issue_token_pair(identity.id)
        logger.info("auth.login.ok", extra={"identity_id": identity.id})
        return LoginOut(identity=identity, tokens=pair)

    # ------------------------------------------------------------------ #
    # Refresh with rotation
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> TokenPairOut:
        """
        Rotate a refresh token and emit a new token pair.

        :param dto: Refresh input.
        :returns: New pair; the presented refresh token is no longer valid.
        :raises AuthError: Any of the token lifecycle failures.
        """
        try:
            pair = self.verifier.refresh(dto.refresh_token)
        except AuthError as err:
            logger.warning("auth.refresh.rejected", extra={"reason": err.code})
            raise
        logger.info("auth.refresh.ok")
        return pair

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, identity_id: int) -> None:
        """
        Clear the persisted refresh token of ``identity_id``.

        Unconditional: logging out twice, or without a live refresh token,
        is not an error.

        :raises InfrastructureFailure: When the store write fails.
        """
        try:
            self.store.set_refresh_token(identity_id, None)
        except CredentialStoreError as exc:
            logger.error("auth.logout.store_failed", extra={"identity_id": identity_id})
            raise InfrastructureFailure() from exc
        logger.info("auth.logout.ok", extra={"identity_id": identity_id})

    # ------------------------------------------------------------------ #
    # Authorization
    # ------------------------------------------------------------------ #

    def authorize(self, access_token: str | None) -> int:
        """
        Resolve an access token to the caller's identity id (stateless).

        :raises AuthError: ``Unauthenticated``, ``InvalidToken`` or ``TokenExpired``.
        """
        try:
            return self.verifier.verify_access(access_token)
        except AuthError as err:
            logger.warning("auth.access.rejected", extra={"reason": err.code})
            raise
