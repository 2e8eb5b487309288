"""Follow resource schemas."""

from __future__ import annotations

from marshmallow import Schema, fields

from .user import UserSummarySchema


class FollowSchema(Schema):
    """Entry of a followers/following list."""

    id = fields.Integer(required=True)
    user = fields.Nested(UserSummarySchema, required=True)
    created_at = fields.DateTime(allow_none=True)


class FollowStatusSchema(Schema):
    """Result of a follow command."""

    follower_id = fields.Integer(required=True)
    following_id = fields.Integer(required=True)
    following = fields.Boolean(required=True)
