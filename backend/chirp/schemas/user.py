"""User resource schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate

from chirp.models.user import Role

USERNAME_PATTERN = r"^[a-zA-Z0-9_]+$"


class UserRegisterSchema(Schema):
    """Payload for creating an account."""

    username = fields.String(
        required=True,
        validate=[
            validate.Length(min=3, max=20),
            validate.Regexp(
                USERNAME_PATTERN,
                error="Username can only contain letters, numbers, and underscores",
            ),
        ],
    )
    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(
        required=True, load_only=True, validate=validate.Length(min=8, max=100)
    )
    display_name = fields.String(required=True, validate=validate.Length(min=1, max=50))


class UserUpdateSchema(Schema):
    """Partial profile update for the authenticated user."""

    display_name = fields.String(validate=validate.Length(min=1, max=50))
    bio = fields.String(validate=validate.Length(max=160))
    profile_image_url = fields.Url(validate=validate.Length(max=500))
    header_image_url = fields.Url(validate=validate.Length(max=500))


class UserAdminUpdateSchema(Schema):
    """Administrative account flags; every field is optional."""

    is_active = fields.Boolean()
    is_verified = fields.Boolean()
    role = fields.Enum(Role, by_value=True)


class UserFilterSchema(Schema):
    """Supported query parameters for listing users."""

    class Meta:
        unknown = EXCLUDE

    email = fields.String(load_default=None, validate=validate.Length(min=1, max=254))
    username = fields.String(load_default=None, validate=validate.Length(min=1, max=20))


class UserSummarySchema(Schema):
    """Compact author card."""

    id = fields.Integer(required=True)
    username = fields.String(required=True)
    display_name = fields.String(required=True)
    profile_image_url = fields.String(allow_none=True)
    is_verified = fields.Boolean(required=True)


class UserProfileSchema(UserSummarySchema):
    """Public profile, as seen by other users."""

    bio = fields.String(allow_none=True)
    header_image_url = fields.String(allow_none=True)
    followers_count = fields.Integer(required=True)
    following_count = fields.Integer(required=True)
    created_at = fields.DateTime(allow_none=True)
    is_following = fields.Boolean(required=True)


class UserPrivateSchema(UserSummarySchema):
    """Full account projection for its owner and administrators."""

    email = fields.Email(required=True)
    bio = fields.String(allow_none=True)
    header_image_url = fields.String(allow_none=True)
    followers_count = fields.Integer(required=True)
    following_count = fields.Integer(required=True)
    is_active = fields.Boolean(required=True)
    role = fields.Enum(Role, by_value=True)
    created_at = fields.DateTime(allow_none=True)
    updated_at = fields.DateTime(allow_none=True)
