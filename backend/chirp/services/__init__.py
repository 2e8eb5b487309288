"""Service layer public API.

This package exposes the essential building blocks for the service layer so that
callers can import from :mod:`chirp.services` without knowing internal structure.

Re-exports
----------
- Base primitives (from ``chirp.services._shared.base``)
    * :class:`BaseService`
    * :class:`ServiceContext`

- Shared DTOs (from ``chirp.services._shared.dto``)
    * :class:`CursorPageIn`, :class:`CursorPageOut`, :class:`PageMeta`

- Session core (from ``chirp.services.auth``)
    * :class:`AuthService`
    * DTOs: :class:`LoginIn`, :class:`RefreshIn`, :class:`LogoutIn`,
      :class:`TokenPairOut`

- Identity, tweet and follow services with their DTOs
"""

from __future__ import annotations

# Base primitives (service base + request-scoped context)
from ._shared.base import BaseService, ServiceContext

# Shared DTOs (compose these in endpoint-specific DTOs)
from ._shared.dto import CursorPageIn, CursorPageOut, PageMeta

# Session core
from .auth.dto import LoginIn, LogoutIn, RefreshIn, TokenPairOut
from .auth.service import AuthService

# Follows
from .follows.dto import FollowOut, FollowStatusOut
from .follows.service import FollowService

# Identity
from .identity.dto import (
    UserAdminUpdateIn,
    UserPrivateOut,
    UserProfileOut,
    UserRegisterIn,
    UserSummaryOut,
    UserUpdateIn,
)
from .identity.service import IdentityService

# Tweets
from .tweets.dto import TweetCreateIn, TweetOut
from .tweets.service import TweetService

__all__ = [
    # Base
    "BaseService",
    "ServiceContext",
    # Shared DTOs
    "CursorPageIn",
    "CursorPageOut",
    "PageMeta",
    # Auth
    "AuthService",
    "LoginIn",
    "RefreshIn",
    "LogoutIn",
    "TokenPairOut",
    # Identity
    "IdentityService",
    "UserRegisterIn",
    "UserUpdateIn",
    "UserAdminUpdateIn",
    "UserPrivateOut",
    "UserProfileOut",
    "UserSummaryOut",
    # Tweets
    "TweetService",
    "TweetCreateIn",
    "TweetOut",
    # Follows
    "FollowService",
    "FollowOut",
    "FollowStatusOut",
]
