"""Authentication endpoints: register, login, token refresh and logout."""

from __future__ import annotations

from flask import Blueprint, request

from accounts.api.deps import (
    REFRESH_COOKIE,
    clear_auth_cookies,
    current_identity_id,
    get_auth_service,
    json_response,
    require_auth,
    set_auth_cookies,
    timing,
)
from accounts.schemas import (
    LoginResponseSchema,
    LoginSchema,
    RefreshSchema,
    RegisterSchema,
    TokenResponseSchema,
    UserSchema,
)
from accounts.services.auth import LoginIn, RefreshIn
from accounts.services.identity.service import IdentityService
from accounts.services.registration.dto import UserRegistrationIn
from accounts.services.registration.service import UserRegistrationService

bp = Blueprint("auth", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshSchema()
user_schema = UserSchema()
login_response_schema = LoginResponseSchema()
token_schema = TokenResponseSchema()


@bp.post("/register")
@timing
def register():
    """Register a new user and return the created representation."""

    payload = register_schema.load(request.get_json(silent=True) or {})
    user = UserRegistrationService().register(UserRegistrationIn(**payload))
    return json_response({"data": user_schema.dump(user)}, status=201)


@bp.post("/login")
@timing
def login():
    """Authenticate credentials, issue a token pair and set the auth cookies."""

    data = login_schema.load(request.get_json(silent=True) or {})
    result = get_auth_service().login(LoginIn(**data))
    user = IdentityService().get_user(result.identity.id)
    body = {
        "data": login_response_schema.dump(
            {
                "user": user,
                "access_token": result.tokens.access_token,
                "refresh_token": result.tokens.refresh_token,
            }
        )
    }
    return set_auth_cookies(json_response(body), result.tokens)


@bp.post("/refresh-token")
@timing
def refresh_token():
    """Rotate the refresh token (cookie first, JSON body second)."""

    body = refresh_schema.load(request.get_json(silent=True) or {})
    presented = request.cookies.get(REFRESH_COOKIE) or body["refresh_token"]
    pair = get_auth_service().refresh(RefreshIn(refresh_token=presented))
    response = json_response({"data": token_schema.dump(pair)})
    return set_auth_cookies(response, pair)


@bp.post("/logout")
@require_auth
@timing
def logout():
    """Revoke the caller's refresh token and clear both cookies."""

    get_auth_service().logout(current_identity_id())
    return clear_auth_cookies(json_response({"data": {}}))
