"""
accounts.services._shared.ports
===============================

*Ports* (hexagonal interfaces) that keep the token core independent of its
storage and signing implementations.

Modules
-------
- :mod:`token_provider`:
    Defines :class:`~.TokenProvider`: minting and verifying signed tokens.

- :mod:`credential_store`:
    Defines :class:`~.CredentialStore` and :class:`~.Identity`: user lookup,
    password checks and the single persisted refresh token, plus the
    :class:`~.InMemoryCredentialStore` fake.

Concrete adapters (PyJWT, SQLAlchemy) live under ``accounts.infra``.
"""

from __future__ import annotations

from .credential_store import CredentialStore, Identity, InMemoryCredentialStore
from .token_provider import ACCESS_TOKEN_TYPE, REFRESH_TOKEN_TYPE, TokenProvider

__all__ = [
    "ACCESS_TOKEN_TYPE",
    "REFRESH_TOKEN_TYPE",
    "CredentialStore",
    "Identity",
    "InMemoryCredentialStore",
    "TokenProvider",
]
