"""DTOs for TweetService."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from chirp.models.tweet import Tweet
from chirp.services.identity.dto import UserSummaryOut


@dataclass(frozen=True, slots=True)
class TweetCreateIn:
    """
    Input DTO for posting a tweet.

    :param author_id: Authenticated author.
    :type author_id: int
    :param content: Raw body; surrounding whitespace is trimmed.
    :type content: str
    """

    author_id: int
    content: str


@dataclass(frozen=True, slots=True)
class TweetOut:
    """Tweet with its author card."""

    id: int
    content: str
    user_id: int
    author: UserSummaryOut
    created_at: datetime | None
    updated_at: datetime | None

    @classmethod
    def from_model(cls, tweet: Tweet) -> TweetOut:
        return cls(
            id=tweet.id,
            content=tweet.content,
            user_id=tweet.user_id,
            author=UserSummaryOut.from_model(tweet.author),
            created_at=tweet.created_at,
            updated_at=tweet.updated_at,
        )
