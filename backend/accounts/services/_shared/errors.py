"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never import Flask or HTTP
machinery. They serve as stable contracts between repositories, the
credential store, and application services.

The translation to HTTP responses (RFC 7807) is handled by
``accounts/core/errors.py`` via ``BaseService.translate_exceptions()``.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    PostgreSQL reports the constraint name; SQLite reports ``table.column``,
    so the column part of a ``uq_<table>_<column>`` name is matched too.

    :param exc: The exception raised by SQLAlchemy during flush/commit.
    :param constraint_name: Constraint to match (e.g. ``"uq_users_email"``).
    :returns: ``True`` if the IntegrityError matches the given constraint.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    name = constraint_name.lower()
    if name in message:
        return True
    if name.startswith("uq_"):
        table, _, column = name[3:].partition("_")
        return f"{table}.{column}" in message
    return False


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - The API layer translates them to ``APIError`` (generic ones → 400).
    """

    pass


class CredentialStoreError(Exception):
    """Raised by credential store adapters when the backing store fails."""


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "User").
    :param key: Identifier or search key.
    """

    entity: str
    key: str | int

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :param detail: Short human-readable explanation.
    """

    entity: str
    detail: str

    def __str__(self) -> str:  # pragma: no cover
        return f"Conflict on {self.entity}: {self.detail}"


# --------------------------------------------------------------------------- #
# Authentication lifecycle
# --------------------------------------------------------------------------- #


class AuthError(ServiceError):
    """
    Failure of the token lifecycle or of a credential check.

    Each kind carries an HTTP-like ``status_code`` and a stable ``code`` so
    the routing layer can reject the request without inspecting the type.

    :param message: Human-readable explanation (safe for clients).
    :param status_code: Optional override of the kind's default status.
    """

    status_code: int = 401
    code: str = "unauthorized"
    default_message: str = "Unauthorized"

    def __init__(self, message: str | None = None, *, status_code: int | None = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = int(status_code)


class Unauthenticated(AuthError):
    """No token was presented."""

    code = "unauthenticated"
    default_message = "Unauthorized request"


class InvalidToken(AuthError):
    """Token is malformed, of the wrong kind, or fails the signature check."""

    code = "invalid_token"
    default_message = "Invalid token"


class TokenExpired(AuthError):
    """Token is past its validity window."""

    code = "token_expired"
    default_message = "Token has expired"


class TokenRevoked(AuthError):
    """Signature is valid but the token no longer matches persisted state."""

    code = "token_revoked"
    default_message = "Refresh token is expired or used"


class IdentityNotFound(AuthError):
    """The identity referenced by credentials or a token does not exist."""

    status_code = 404
    code = "identity_not_found"
    default_message = "User does not exist"


class CredentialMismatch(AuthError):
    """Login password check failed."""

    code = "invalid_credentials"
    default_message = "Invalid user credentials"


class InfrastructureFailure(AuthError):
    """Credential store unreachable or write failed."""

    status_code = 500
    code = "infrastructure_failure"
    default_message = "Something went wrong while generating the access and refresh token"
