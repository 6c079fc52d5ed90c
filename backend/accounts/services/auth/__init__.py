"""Token lifecycle: issue, verify, rotate and revoke."""

from .dto import LoginIn, LoginOut, RefreshIn, TokenConfig, TokenPairOut
from .issuer import TokenIssuer
from .service import AuthService
from .verifier import TokenVerifier

__all__ = [
    "AuthService",
    "LoginIn",
    "LoginOut",
    "RefreshIn",
    "TokenConfig",
    "TokenIssuer",
    "TokenPairOut",
    "TokenVerifier",
]
