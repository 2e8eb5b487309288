"""Tweet resource schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from .user import UserSummarySchema


class TweetCreateSchema(Schema):
    """Payload for posting a tweet; the upper bound is enforced after trimming."""

    content = fields.String(required=True, validate=validate.Length(min=1))


class TweetSchema(Schema):
    """Tweet with an embedded author card."""

    id = fields.Integer(required=True)
    content = fields.String(required=True)
    user_id = fields.Integer(required=True)
    author = fields.Nested(UserSummarySchema, required=True)
    created_at = fields.DateTime(allow_none=True)
    updated_at = fields.DateTime(allow_none=True)
