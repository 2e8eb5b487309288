"""
IdentityService
===============

Aggregate service responsible for managing the `User` aggregate:
- Registration with unique username and email
- Public profiles and self-service profile edits
- Administrative listing and account flags (active, verified, role)

Credential checks and token issuance live in :mod:`chirp.services.auth`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy.exc import IntegrityError

from chirp.repositories.base import Pagination
from chirp.repositories.user import UserRepository
from chirp.services._shared.base import BaseService
from chirp.services._shared.dto import PageMeta
from chirp.services._shared.errors import ConflictError, NotFoundError, violates
from chirp.services.identity.dto import (
    UserAdminUpdateIn,
    UserPrivateOut,
    UserProfileOut,
    UserRegisterIn,
    UserUpdateIn,
)


def _username_taken(username: str) -> ConflictError:
    return ConflictError("User", f"username '{username}' is already taken", code="username_taken")


def _email_taken() -> ConflictError:
    return ConflictError("User", "email is already registered", code="email_taken")


class IdentityService(BaseService):
    """
    Application service for the `User` aggregate.

    Responsibilities
    ----------------
    - Register users ensuring username and email uniqueness.
    - Retrieve private and public projections of a user.
    - Update profile fields safely.
    - Let administrators list accounts and toggle their flags.
    """

    # --------------------------------------------------------------------- #
    # Registration
    # --------------------------------------------------------------------- #

    def register_user(self, dto: UserRegisterIn) -> UserPrivateOut:
        """
        Register a new user.

        :param dto: User registration input DTO.
        :type dto: UserRegisterIn
        :returns: The created account.
        :rtype: UserPrivateOut
        :raises ConflictError: ``username_taken`` or ``email_taken``.
        """

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users

            if repo.exists_by_username(dto.username):
                raise _username_taken(dto.username)
            if repo.exists_by_email(dto.email):
                raise _email_taken()

            try:
                user = repo.model(
                    username=dto.username,
                    email=dto.email,
                    password=dto.password,  # model hashes via setter
                    display_name=dto.display_name,
                )
                repo.add(user)
            except IntegrityError as exc:
                # Lost a race against a concurrent registration
                if violates(exc, "uq_users_username") or violates(exc, "users.username"):
                    raise _username_taken(dto.username) from exc
                if violates(exc, "uq_users_email") or violates(exc, "users.email"):
                    raise _email_taken() from exc
                raise

            return UserPrivateOut.from_model(user)

    # --------------------------------------------------------------------- #
    # Retrieval
    # --------------------------------------------------------------------- #

    def get_user(self, user_id: int) -> UserPrivateOut:
        """
        Retrieve a user by identifier.

        :param user_id: User primary key.
        :type user_id: int
        :returns: Private user DTO.
        :rtype: UserPrivateOut
        :raises NotFoundError: If user does not exist.
        """

        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            return UserPrivateOut.from_model(user)

    def get_profile(self, username: str, *, viewer_id: int | None = None) -> UserProfileOut:
        """
        Retrieve a public profile by username.

        :param username: Public handle.
        :param viewer_id: Authenticated viewer, used to fill ``is_following``.
        :raises NotFoundError: If no such user exists.
        """

        with self.ro_uow() as uow:
            user = uow.users.get_by_username(username)
            if user is None:
                raise NotFoundError("User", username)

            following = False
            if viewer_id is not None and viewer_id != user.id:
                following = uow.follows.is_following(viewer_id, user.id)

            return UserProfileOut(
                id=user.id,
                username=user.username,
                display_name=user.display_name,
                bio=user.bio,
                profile_image_url=user.profile_image_url,
                header_image_url=user.header_image_url,
                followers_count=user.followers_count,
                following_count=user.following_count,
                is_verified=user.is_verified,
                created_at=user.created_at,
                is_following=following,
            )

    # --------------------------------------------------------------------- #
    # Updates
    # --------------------------------------------------------------------- #

    def update_profile(self, user_id: int, dto: UserUpdateIn) -> UserPrivateOut:
        """
        Update the caller's own profile fields.

        :param user_id: User identifier.
        :param dto: Fields to change; ``None`` values are ignored.
        :raises NotFoundError: When user not found.
        """

        updates: dict[str, Any] = {
            k: v
            for k, v in {
                "display_name": dto.display_name,
                "bio": dto.bio,
                "profile_image_url": dto.profile_image_url,
                "header_image_url": dto.header_image_url,
            }.items()
            if v is not None
        }
        return self._apply_updates(user_id, updates)

    def admin_update(self, user_id: int, dto: UserAdminUpdateIn) -> UserPrivateOut:
        """
        Change administrative flags of any account.

        Disabling an account blocks new logins and refreshes; access tokens
        already issued keep working until they expire.

        :raises NotFoundError: When user not found.
        """

        updates: dict[str, Any] = {
            k: v
            for k, v in {
                "is_active": dto.is_active,
                "is_verified": dto.is_verified,
                "role": dto.role,
            }.items()
            if v is not None
        }
        return self._apply_updates(user_id, updates)

    def _apply_updates(self, user_id: int, updates: Mapping[str, Any]) -> UserPrivateOut:
        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get_for_update(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            if updates:
                repo.update(user, **updates)
            return UserPrivateOut.from_model(user)

    # --------------------------------------------------------------------- #
    # Admin listing
    # --------------------------------------------------------------------- #

    def list_users(
        self,
        pagination: Pagination,
        *,
        filters: Mapping[str, Any] | None = None,
    ) -> tuple[list[UserPrivateOut], PageMeta]:
        """
        Offset-paginate every account with optional equality filters.

        :param pagination: Page, limit and sort tokens.
        :param filters: Whitelisted filters such as ``username`` or ``email``.
        :returns: Items and pagination metadata.
        """

        with self.ro_uow() as uow:
            page = uow.users.paginate(pagination, filters=filters)
            items = [UserPrivateOut.from_model(u) for u in page.items]
            return items, PageMeta(page=page.page, limit=page.limit, total=page.total)
