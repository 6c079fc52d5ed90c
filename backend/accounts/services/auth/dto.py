from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from accounts.services._shared.ports import Identity

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    At least one of ``username`` / ``email`` must be present; the record
    matching either is used.

    :param password: Raw password (to be verified).
    :type password: str
    :param username: Account handle.
    :type username: str | None
    :param email: Account email.
    :type email: str | None
    """

    password: str
    username: str | None = None
    email: str | None = None


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Encoded refresh JWT (may be empty when absent).
    :type refresh_token: str | None
    """

    refresh_token: str | None


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with access and refresh tokens.

    :param access_token: Encoded access JWT.
    :type access_token: str
    :param refresh_token: Encoded refresh JWT (already persisted).
    :type refresh_token: str
    """

    access_token: str
    refresh_token: str


@dataclass(frozen=True, slots=True)
class LoginOut:
    """
    Result of a successful login.

    :param identity: Authenticated identity.
    :type identity: :class:`Identity`
    :param tokens: Freshly issued pair.
    :type tokens: :class:`TokenPairOut`
    """

    identity: Identity
    tokens: TokenPairOut


# ------------------------------ Config ------------------------------------ #


@dataclass(frozen=True, slots=True)
class TokenConfig:
    """
    Token signing configuration, fixed for the lifetime of the process.

    :param access_secret: HMAC secret for access tokens.
    :type access_secret: str
    :param refresh_secret: HMAC secret for refresh tokens (distinct).
    :type refresh_secret: str
    :param access_expires: Access token lifetime.
    :type access_expires: timedelta
    :param refresh_expires: Refresh token lifetime.
    :type refresh_expires: timedelta
    :param algorithm: JWS algorithm.
    :type algorithm: str
    :param issuer: Optional ``iss`` claim.
    :type issuer: str | None
    :param leeway: Clock-skew tolerance in seconds.
    :type leeway: int
    :raises ValueError: On empty or identical secrets, or non-positive expiries.
    """

    access_secret: str
    refresh_secret: str
    access_expires: timedelta
    refresh_expires: timedelta
    algorithm: str = "HS256"
    issuer: str | None = None
    leeway: int = 0

    def __post_init__(self) -> None:
        if not self.access_secret or not self.refresh_secret:
            raise ValueError("Token secrets must not be empty.")
        if self.access_secret == self.refresh_secret:
            raise ValueError("Access and refresh token secrets must differ.")
        if self.access_expires <= timedelta(0) or self.refresh_expires <= timedelta(0):
            raise ValueError("Token expiries must be positive.")
        if self.leeway < 0:
            raise ValueError("Token leeway must not be negative.")

    @classmethod
    def from_mapping(cls, cfg: Mapping[str, Any]) -> TokenConfig:
        """Build from a Flask-style config mapping (see :class:`BaseConfig`)."""
        return cls(
            access_secret=str(cfg.get("ACCESS_TOKEN_SECRET") or ""),
            refresh_secret=str(cfg.get("REFRESH_TOKEN_SECRET") or ""),
            access_expires=timedelta(seconds=int(cfg.get("ACCESS_TOKEN_EXPIRES_SECONDS", 900))),
            refresh_expires=timedelta(
                seconds=int(cfg.get("REFRESH_TOKEN_EXPIRES_SECONDS", 10 * 24 * 3600))
            ),
            algorithm=str(cfg.get("JWT_ALGORITHM") or "HS256"),
            issuer=cfg.get("JWT_ISSUER") or None,
            leeway=int(cfg.get("JWT_LEEWAY_SECONDS") or 0),
        )
