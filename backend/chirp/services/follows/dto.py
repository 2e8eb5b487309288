"""DTOs for FollowService."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from chirp.services.identity.dto import UserSummaryOut


@dataclass(frozen=True, slots=True)
class FollowOut:
    """
    One entry of a followers/following list.

    :param id: Follow edge id; doubles as the pagination cursor.
    :param user: The user on the other end of the edge.
    :param created_at: When the follow happened.
    """

    id: int
    user: UserSummaryOut
    created_at: datetime | None


@dataclass(frozen=True, slots=True)
class FollowStatusOut:
    """Result of a follow/unfollow command."""

    follower_id: int
    following_id: int
    following: bool
