"""User resource schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate


class UserSchema(Schema):
    """Public representation of a user entity."""

    id = fields.Integer(required=True)
    username = fields.String(required=True)
    email = fields.Email(required=True)
    full_name = fields.String(required=True)
    avatar = fields.String(required=True)
    cover_image = fields.String(allow_none=True)
    created_at = fields.DateTime(allow_none=True)
    updated_at = fields.DateTime(allow_none=True)


class ChangePasswordSchema(Schema):
    """Payload for changing the caller's password."""

    old_password = fields.String(required=True, validate=validate.Length(min=1, max=128))
    new_password = fields.String(required=True, validate=validate.Length(min=8, max=128))


class UpdateAccountSchema(Schema):
    """Payload for replacing the caller's account details."""

    full_name = fields.String(required=True, validate=validate.Length(min=1, max=100))
    email = fields.Email(required=True, validate=validate.Length(max=254))


class AvatarSchema(Schema):
    """New avatar image URL."""

    avatar = fields.Url(required=True, validate=validate.Length(max=500))


class CoverImageSchema(Schema):
    """New cover image URL."""

    cover_image = fields.Url(required=True, validate=validate.Length(max=500))
