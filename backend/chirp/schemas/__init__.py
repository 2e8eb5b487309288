"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import LoginSchema, RefreshSchema, TokenPairSchema, WhoAmISchema
from .common import (
    CursorMetaSchema,
    CursorQuerySchema,
    MetaSchema,
    PaginationQuerySchema,
    SortQuerySchema,
    build_cursor_meta,
    build_meta,
)
from .follow import FollowSchema, FollowStatusSchema
from .tweet import TweetCreateSchema, TweetSchema
from .user import (
    UserAdminUpdateSchema,
    UserFilterSchema,
    UserPrivateSchema,
    UserProfileSchema,
    UserRegisterSchema,
    UserSummarySchema,
    UserUpdateSchema,
)

__all__ = [
    "LoginSchema",
    "RefreshSchema",
    "TokenPairSchema",
    "WhoAmISchema",
    "CursorQuerySchema",
    "CursorMetaSchema",
    "PaginationQuerySchema",
    "SortQuerySchema",
    "MetaSchema",
    "build_meta",
    "build_cursor_meta",
    "FollowSchema",
    "FollowStatusSchema",
    "TweetSchema",
    "TweetCreateSchema",
    "UserRegisterSchema",
    "UserUpdateSchema",
    "UserAdminUpdateSchema",
    "UserFilterSchema",
    "UserPrivateSchema",
    "UserProfileSchema",
    "UserSummarySchema",
]
