"""Tweet repository."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import select

from chirp.models.tweet import Tweet
from chirp.repositories.base import BaseRepository, CursorPage, paginate_cursor


class TweetRepository(BaseRepository[Tweet]):
    """Persistence for :class:`Tweet`; listings are keyset-paginated by id."""

    model = Tweet

    def _filterable_fields(self):
        return {"user_id": Tweet.user_id}

    def latest(self, *, limit: int, cursor: int | None = None) -> CursorPage[Tweet]:
        """Return the newest tweets across all authors."""
        return paginate_cursor(
            self.session, select(Tweet), id_attr=Tweet.id, limit=limit, cursor=cursor
        )

    def by_authors(
        self,
        author_ids: Iterable[int],
        *,
        limit: int,
        cursor: int | None = None,
    ) -> CursorPage[Tweet]:
        """Return the newest tweets written by any of ``author_ids``."""
        stmt = select(Tweet).where(Tweet.user_id.in_(list(author_ids)))
        return paginate_cursor(self.session, stmt, id_attr=Tweet.id, limit=limit, cursor=cursor)
