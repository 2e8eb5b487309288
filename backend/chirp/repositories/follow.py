"""Follow repository."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select

from chirp.models.follow import Follow
from chirp.repositories.base import BaseRepository, CursorPage, paginate_cursor


class FollowRepository(BaseRepository[Follow]):
    """Persistence for follow edges.

    Counter maintenance lives in :class:`~chirp.repositories.user.UserRepository`
    and is coordinated by the follow service inside one unit of work.
    """

    model = Follow

    def get_edge(self, follower_id: int, following_id: int) -> Follow | None:
        stmt = select(Follow).where(
            Follow.follower_id == follower_id, Follow.following_id == following_id
        )
        return cast(Follow | None, self.session.execute(stmt).scalars().first())

    def is_following(self, follower_id: int, following_id: int) -> bool:
        stmt = select(Follow.id).where(
            Follow.follower_id == follower_id, Follow.following_id == following_id
        )
        return self.session.execute(stmt).first() is not None

    def following_ids(self, follower_id: int) -> list[int]:
        """Return ids of every user followed by ``follower_id``."""
        stmt = select(Follow.following_id).where(Follow.follower_id == follower_id)
        return list(self.session.execute(stmt).scalars().all())

    def followers_of(
        self, user_id: int, *, limit: int, cursor: int | None = None
    ) -> CursorPage[Follow]:
        """Edges pointing at ``user_id``, newest follow first."""
        stmt = select(Follow).where(Follow.following_id == user_id)
        return paginate_cursor(self.session, stmt, id_attr=Follow.id, limit=limit, cursor=cursor)

    def following_of(
        self, user_id: int, *, limit: int, cursor: int | None = None
    ) -> CursorPage[Follow]:
        """Edges leaving ``user_id``, newest follow first."""
        stmt = select(Follow).where(Follow.follower_id == user_id)
        return paginate_cursor(self.session, stmt, id_attr=Follow.id, limit=limit, cursor=cursor)
