"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from chirp.repositories.base import (
    BaseRepository,
    CursorPage,
    Page,
    Pagination,
    paginate_cursor,
    paginate_select,
)
from chirp.repositories.follow import FollowRepository
from chirp.repositories.revoked_token import RevokedTokenRepository
from chirp.repositories.tweet import TweetRepository
from chirp.repositories.user import UserRepository

__all__ = [
    # Base
    "BaseRepository",
    "CursorPage",
    "Page",
    "Pagination",
    "paginate_cursor",
    "paginate_select",
    # Domain
    "FollowRepository",
    "RevokedTokenRepository",
    "TweetRepository",
    "UserRepository",
]
