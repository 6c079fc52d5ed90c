"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar, cast

from flask import Response, current_app, g, jsonify, request

from accounts.core.extensions import get_token_provider
from accounts.infra.sql import SQLAlchemyCredentialStore
from accounts.services.auth import AuthService, TokenPairOut

F = TypeVar("F", bound=Callable[..., Any])

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"


def get_auth_service() -> AuthService:
    """Build an :class:`AuthService` wired to the app's signer and the database."""

    return AuthService(
        token_provider=get_token_provider(),
        credential_store=SQLAlchemyCredentialStore(),
    )


def _bearer_token() -> str | None:
    header = request.headers.get("Authorization", "")
    scheme, _, value = header.partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    return None


def access_token_from_request() -> str | None:
    """Return the access token from the ``accessToken`` cookie or the bearer header."""

    return request.cookies.get(ACCESS_COOKIE) or _bearer_token()


def require_auth(func: F) -> F:
    """Ensure the request carries a valid access token.

    The verified identity id is stored on ``flask.g.identity_id``.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        g.identity_id = get_auth_service().authorize(access_token_from_request())
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def current_identity_id() -> int:
    """Return the identity id verified by :func:`require_auth`."""

    identity_id = g.get("identity_id")
    if identity_id is None:
        raise RuntimeError("current_identity_id() used outside a require_auth route.")
    return cast(int, identity_id)


# --------------------------------------------------------------------------- #
# Cookies
# --------------------------------------------------------------------------- #


def _cookie_options() -> dict[str, Any]:
    return {
        "httponly": True,
        "secure": bool(current_app.config.get("AUTH_COOKIE_SECURE", True)),
        "samesite": current_app.config.get("AUTH_COOKIE_SAMESITE", "Lax"),
        "path": "/",
    }


def set_auth_cookies(response: Response, pair: TokenPairOut) -> Response:
    """Attach both tokens as HTTP-only cookies."""

    options = _cookie_options()
    access_age = int(current_app.config.get("ACCESS_TOKEN_EXPIRES_SECONDS", 900))
    refresh_age = int(current_app.config.get("REFRESH_TOKEN_EXPIRES_SECONDS", 864000))
    response.set_cookie(ACCESS_COOKIE, pair.access_token, max_age=access_age, **options)
    response.set_cookie(REFRESH_COOKIE, pair.refresh_token, max_age=refresh_age, **options)
    return response


def clear_auth_cookies(response: Response) -> Response:
    """Expire both auth cookies on the client."""

    options = _cookie_options()
    response.delete_cookie(ACCESS_COOKIE, **options)
    response.delete_cookie(REFRESH_COOKIE, **options)
    return response


# --------------------------------------------------------------------------- #
# Responses
# --------------------------------------------------------------------------- #


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
