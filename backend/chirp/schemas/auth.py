"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from .user import UserPrivateSchema


class LoginSchema(Schema):
    """Input payload for authenticating a user by username or email."""

    identifier = fields.String(required=True, validate=validate.Length(min=1, max=254))
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=1))


class RefreshSchema(Schema):
    """Input payload for exchanging a refresh token."""

    refresh_token = fields.String(
        required=True, data_key="refreshToken", validate=validate.Length(min=1)
    )


class TokenPairSchema(Schema):
    """Response payload with both tokens and the authenticated user."""

    access_token = fields.String(required=True, data_key="accessToken")
    refresh_token = fields.String(required=True, data_key="refreshToken")
    user = fields.Nested(UserPrivateSchema, required=True)


class WhoAmISchema(Schema):
    """Response payload for ``/auth/me``."""

    user = fields.Nested(UserPrivateSchema, required=True)
