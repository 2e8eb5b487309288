"""
FollowService
=============

Follow/unfollow users and list follow edges.

Creating or removing an edge and adjusting both users' counters happen in the
same unit of work, so counters never drift from the ``follows`` table.
"""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError

from chirp.models.follow import Follow
from chirp.models.user import User
from chirp.repositories.base import CursorPage
from chirp.services._shared.base import BaseService
from chirp.services._shared.dto import CursorPageIn, CursorPageOut
from chirp.services._shared.errors import ConflictError, NotFoundError, ServiceError, violates
from chirp.services.follows.dto import FollowOut, FollowStatusOut
from chirp.services.identity.dto import UserSummaryOut
from chirp.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork


def _already_following() -> ConflictError:
    return ConflictError("Follow", "already following this user", code="already_following")


class FollowService(BaseService):
    """Application service for follow edges between users."""

    # --------------------------------------------------------------------- #
    # Commands
    # --------------------------------------------------------------------- #

    def follow(self, follower_id: int, username: str) -> FollowStatusOut:
        """
        Make ``follower_id`` follow the user called ``username``.

        :raises NotFoundError: If the target does not exist.
        :raises ServiceError: ``cannot_follow_self``.
        :raises ConflictError: ``already_following``.
        """
        with self.rw_uow() as uow:
            target = self._target(uow, username)
            if target.id == follower_id:
                raise ServiceError("You cannot follow yourself", code="cannot_follow_self")
            if uow.follows.is_following(follower_id, target.id):
                raise _already_following()

            try:
                uow.follows.add(Follow(follower_id=follower_id, following_id=target.id))
            except IntegrityError as exc:
                if violates(exc, "uq_follows_pair") or violates(exc, "follows.follower_id"):
                    raise _already_following() from exc
                raise

            uow.users.increment_counter(follower_id, "following_count", 1)
            uow.users.increment_counter(target.id, "followers_count", 1)
            return FollowStatusOut(follower_id=follower_id, following_id=target.id, following=True)

    def unfollow(self, follower_id: int, username: str) -> FollowStatusOut:
        """
        Remove the edge ``follower_id -> username``.

        :raises NotFoundError: If the target does not exist.
        :raises ServiceError: ``not_following`` when no edge exists.
        """
        with self.rw_uow() as uow:
            target = self._target(uow, username)
            edge = uow.follows.get_edge(follower_id, target.id)
            if edge is None:
                raise ServiceError("You are not following this user", code="not_following")

            uow.follows.delete(edge)
            uow.users.increment_counter(follower_id, "following_count", -1)
            uow.users.increment_counter(target.id, "followers_count", -1)
            return FollowStatusOut(
                follower_id=follower_id, following_id=target.id, following=False
            )

    # --------------------------------------------------------------------- #
    # Queries
    # --------------------------------------------------------------------- #

    def is_following(self, follower_id: int, username: str) -> bool:
        """:raises NotFoundError: If the target does not exist."""
        with self.ro_uow() as uow:
            target = self._target(uow, username)
            return uow.follows.is_following(follower_id, target.id)

    def followers(self, username: str, page: CursorPageIn) -> CursorPageOut[FollowOut]:
        """Users following ``username``, most recent first."""
        with self.ro_uow() as uow:
            target = self._target(uow, username)
            result = uow.follows.followers_of(
                target.id, limit=page.clamped_limit(), cursor=page.cursor
            )
            return self._to_page(result, side="follower")

    def following(self, username: str, page: CursorPageIn) -> CursorPageOut[FollowOut]:
        """Users followed by ``username``, most recent first."""
        with self.ro_uow() as uow:
            target = self._target(uow, username)
            result = uow.follows.following_of(
                target.id, limit=page.clamped_limit(), cursor=page.cursor
            )
            return self._to_page(result, side="following")

    # --------------------------------------------------------------------- #
    # Utilities
    # --------------------------------------------------------------------- #

    @staticmethod
    def _target(uow: SQLAlchemyUnitOfWork, username: str) -> User:
        user = uow.users.get_by_username(username)
        if user is None:
            raise NotFoundError("User", username)
        return user

    @staticmethod
    def _to_page(result: CursorPage[Follow], *, side: str) -> CursorPageOut[FollowOut]:
        items = [
            FollowOut(
                id=edge.id,
                user=UserSummaryOut.from_model(getattr(edge, side)),
                created_at=edge.created_at,
            )
            for edge in result.items
        ]
        return CursorPageOut(items=items, has_more=result.has_more, next_cursor=result.next_cursor)
