"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, post_load, validate

from .user import UserSchema


class RegisterSchema(Schema):
    """Input payload for account registration."""

    full_name = fields.String(required=True, validate=validate.Length(min=1, max=100))
    email = fields.Email(required=True, validate=validate.Length(max=254))
    username = fields.String(required=True, validate=validate.Length(min=3, max=50))
    password = fields.String(required=True, validate=validate.Length(min=8, max=128))
    avatar = fields.Url(required=True, validate=validate.Length(max=500))
    cover_image = fields.Url(
        load_default=None, allow_none=True, validate=validate.Length(max=500)
    )


class LoginSchema(Schema):
    """Input payload for authenticating a user by username or email."""

    username = fields.String(load_default=None, validate=validate.Length(max=50))
    email = fields.Email(load_default=None, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))


class RefreshSchema(Schema):
    """Optional body carrying the refresh token when no cookie is sent.

    Accepts ``refresh_token`` or the camelCase ``refreshToken``; the loaded
    dict always exposes the value as ``refresh_token``.
    """

    class Meta:
        unknown = EXCLUDE

    refresh_token = fields.String(load_default=None, allow_none=True)
    camel_refresh_token = fields.String(
        data_key="refreshToken", load_default=None, allow_none=True
    )

    @post_load
    def _merge_spellings(self, data, **kwargs):
        camel = data.pop("camel_refresh_token", None)
        if not (data.get("refresh_token") or "").strip():
            data["refresh_token"] = camel
        return data


class TokenResponseSchema(Schema):
    """Response payload containing a token pair."""

    access_token = fields.String(required=True)
    refresh_token = fields.String(required=True)


class LoginResponseSchema(TokenResponseSchema):
    """Response payload for a successful login."""

    user = fields.Nested(UserSchema, required=True)
