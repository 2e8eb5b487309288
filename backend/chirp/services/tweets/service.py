"""
TweetService
============

Post, read, list and delete tweets.

Listings are keyset-paginated on the tweet id (newest first); the home
timeline is the caller's own tweets plus those of everyone they follow.
"""

from __future__ import annotations

from chirp.repositories.tweet import TweetRepository
from chirp.services._shared.base import BaseService, ServiceContext
from chirp.services._shared.dto import CursorPageIn, CursorPageOut
from chirp.services._shared.errors import NotFoundError, ServiceError
from chirp.services.tweets.dto import TweetCreateIn, TweetOut

DEFAULT_TWEET_MAX_LENGTH = 280


class TweetService(BaseService):
    """
    Application service for the ``Tweet`` aggregate.

    :param ctx: Request context; ``is_admin`` lets an actor delete any tweet.
    :param max_length: Upper bound for trimmed content.
    """

    def __init__(
        self,
        *,
        ctx: ServiceContext | None = None,
        max_length: int = DEFAULT_TWEET_MAX_LENGTH,
    ) -> None:
        super().__init__(ctx=ctx)
        self.max_length = max_length

    # --------------------------------------------------------------------- #
    # Commands
    # --------------------------------------------------------------------- #

    def create(self, dto: TweetCreateIn) -> TweetOut:
        """
        Publish a tweet for ``dto.author_id``.

        :raises ServiceError: ``invalid_tweet`` when the trimmed content is
            empty or too long, ``bad_request`` when the author does not exist.
        """
        content = (dto.content or "").strip()
        if not content:
            raise ServiceError("Tweet content cannot be empty", code="invalid_tweet")
        if len(content) > self.max_length:
            raise ServiceError(
                f"Tweet content cannot exceed {self.max_length} characters",
                code="invalid_tweet",
            )

        with self.rw_uow() as uow:
            if uow.users.get(dto.author_id) is None:
                raise ServiceError("User not found")
            repo: TweetRepository = uow.tweets
            tweet = repo.add(repo.model(content=content, user_id=dto.author_id))
            return TweetOut.from_model(tweet)

    def delete(self, tweet_id: int) -> None:
        """
        Delete a tweet written by the acting user (admins may delete any).

        :raises NotFoundError: If the tweet does not exist.
        :raises AuthorizationError: If the actor is neither author nor admin.
        """
        with self.rw_uow() as uow:
            tweet = uow.tweets.get_for_update(tweet_id)
            if tweet is None:
                raise NotFoundError("Tweet", tweet_id)
            self.ensure_owner(
                self.ctx.actor_id, tweet.user_id, msg="You can only delete your own tweets"
            )
            uow.tweets.delete(tweet)

    # --------------------------------------------------------------------- #
    # Queries
    # --------------------------------------------------------------------- #

    def get(self, tweet_id: int) -> TweetOut:
        """:raises NotFoundError: If the tweet does not exist."""
        with self.ro_uow() as uow:
            tweet = uow.tweets.get(tweet_id)
            if tweet is None:
                raise NotFoundError("Tweet", tweet_id)
            return TweetOut.from_model(tweet)

    def latest(self, page: CursorPageIn) -> CursorPageOut[TweetOut]:
        """Newest tweets from every author."""
        with self.ro_uow() as uow:
            result = uow.tweets.latest(limit=page.clamped_limit(), cursor=page.cursor)
            return CursorPageOut(
                items=[TweetOut.from_model(t) for t in result.items],
                has_more=result.has_more,
                next_cursor=result.next_cursor,
            )

    def timeline(self, user_id: int, page: CursorPageIn) -> CursorPageOut[TweetOut]:
        """Home timeline: ``user_id``'s tweets plus those of followed users."""
        with self.ro_uow() as uow:
            author_ids = {user_id, *uow.follows.following_ids(user_id)}
            result = uow.tweets.by_authors(
                author_ids, limit=page.clamped_limit(), cursor=page.cursor
            )
            return CursorPageOut(
                items=[TweetOut.from_model(t) for t in result.items],
                has_more=result.has_more,
                next_cursor=result.next_cursor,
            )
