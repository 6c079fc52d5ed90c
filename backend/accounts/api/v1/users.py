"""Endpoints for the authenticated user's own account."""

from __future__ import annotations

from flask import Blueprint, request

from accounts.api.deps import current_identity_id, json_response, require_auth, timing
from accounts.schemas import (
    AvatarSchema,
    ChangePasswordSchema,
    CoverImageSchema,
    UpdateAccountSchema,
    UserSchema,
)
from accounts.services.identity.dto import AccountUpdateIn, UserPasswordChangeIn
from accounts.services.identity.service import IdentityService

bp = Blueprint("users", __name__)

user_schema = UserSchema()
change_password_schema = ChangePasswordSchema()
update_account_schema = UpdateAccountSchema()
avatar_schema = AvatarSchema()
cover_image_schema = CoverImageSchema()


def _json_body() -> dict:
    return request.get_json(silent=True) or {}


@bp.get("/current-user")
@require_auth
@timing
def current_user():
    """Return the authenticated user profile."""

    user = IdentityService().get_user(current_identity_id())
    return json_response({"data": user_schema.dump(user)})


@bp.post("/change-password")
@require_auth
@timing
def change_password():
    """Change the caller's password after checking the old one."""

    data = change_password_schema.load(_json_body())
    IdentityService().change_password(UserPasswordChangeIn(user_id=current_identity_id(), **data))
    return json_response({"data": {}})


@bp.patch("/update-account")
@require_auth
@timing
def update_account():
    """Replace the caller's full name and email."""

    data = update_account_schema.load(_json_body())
    user = IdentityService().update_account(current_identity_id(), AccountUpdateIn(**data))
    return json_response({"data": user_schema.dump(user)})


@bp.patch("/avatar")
@require_auth
@timing
def update_avatar():
    """Point the caller's avatar at a new image URL."""

    data = avatar_schema.load(_json_body())
    user = IdentityService().update_avatar(current_identity_id(), data["avatar"])
    return json_response({"data": user_schema.dump(user)})


@bp.patch("/cover-image")
@require_auth
@timing
def update_cover_image():
    """Point the caller's cover image at a new image URL."""

    data = cover_image_schema.load(_json_body())
    user = IdentityService().update_cover_image(current_identity_id(), data["cover_image"])
    return json_response({"data": user_schema.dump(user)})
