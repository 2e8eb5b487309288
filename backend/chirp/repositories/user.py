"""User repository: credential lookups, profile updates and follow counters."""

from __future__ import annotations

from typing import Literal, cast

from sqlalchemy import or_, select, update

from chirp.models.user import User
from chirp.repositories.base import BaseRepository

CounterField = Literal["followers_count", "following_count"]


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    It never issues or verifies tokens; the session core only reads through it.
    """

    model = User

    # ---------------------------- Whitelists ----------------------------

    def _sortable_fields(self):
        return {
            "id": User.id,
            "username": User.username,
            "created_at": User.created_at,
            "followers_count": User.followers_count,
        }

    def _filterable_fields(self):
        return {
            "username": User.username,
            "email": User.email,
            "role": User.role,
            "is_active": User.is_active,
        }

    def _updatable_fields(self):
        """Profile fields plus the admin-managed flags (never the password)."""
        return {
            "display_name",
            "bio",
            "profile_image_url",
            "header_image_url",
            "is_active",
            "is_verified",
            "role",
        }

    # ---------------------------- Lookup helpers ----------------------------

    def find_by_identifier(self, identifier: str) -> User | None:
        """Fetch a user whose username OR email equals ``identifier``.

        Both columns are matched in a single query; the email side is compared
        in its normalized (lowercase, trimmed) form.

        :param identifier: Username or email typed at login.
        :type identifier: str
        :returns: Matching user or ``None``.
        :rtype: User | None
        """
        stmt = select(User).where(
            or_(User.username == identifier.strip(), User.email == identifier.strip().lower())
        )
        return cast(User | None, self.session.execute(stmt.limit(1)).scalars().first())

    def get_by_username(self, username: str) -> User | None:
        stmt = select(User).where(User.username == username)
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def get_by_email(self, email: str) -> User | None:
        stmt = select(User).where(User.email == email.strip().lower())
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def exists_by_username(self, username: str) -> bool:
        stmt = select(User.id).where(User.username == username.strip())
        return self.session.execute(stmt).first() is not None

    def exists_by_email(self, email: str) -> bool:
        stmt = select(User.id).where(User.email == email.strip().lower())
        return self.session.execute(stmt).first() is not None

    # ---------------------------- Counters ----------------------------

    def increment_counter(self, user_id: int, field: CounterField, delta: int) -> None:
        """Atomically add ``delta`` to a follow counter with one ``UPDATE``.

        :param user_id: Row to update.
        :param field: ``followers_count`` or ``following_count``.
        :param delta: Signed increment, usually ``+1`` or ``-1``.
        """
        column = getattr(User, field)
        self.session.execute(
            update(User)
            .where(User.id == user_id)
            .values({column: column + delta})
            .execution_options(synchronize_session="fetch")
        )
