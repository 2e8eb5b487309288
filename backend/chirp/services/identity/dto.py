"""
DTOs for IdentityService.

Data Transfer Objects (DTOs) isolate the service layer from ORM models,
ensuring clear input/output contracts and type safety.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from chirp.models.user import Role, User

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UserRegisterIn:
    """
    Input DTO for user registration.

    :param username: Public handle (3-20 chars, letters, digits, underscore).
    :type username: str
    :param email: Login email (normalized to lowercase).
    :type email: str
    :param password: Raw password to be hashed by the model.
    :type password: str
    :param display_name: Name shown on the profile.
    :type display_name: str
    """

    username: str
    email: str
    password: str
    display_name: str


@dataclass(frozen=True, slots=True)
class UserUpdateIn:
    """
    Input DTO for profile updates; ``None`` leaves a field untouched.

    :param display_name: New display name.
    :param bio: New bio.
    :param profile_image_url: New avatar URL.
    :param header_image_url: New banner URL.
    """

    display_name: str | None = None
    bio: str | None = None
    profile_image_url: str | None = None
    header_image_url: str | None = None


@dataclass(frozen=True, slots=True)
class UserAdminUpdateIn:
    """
    Input DTO for administrative account changes.

    :param is_active: Enable or disable login for the account.
    :param is_verified: Grant or remove the verified badge.
    :param role: Change the account role.
    """

    is_active: bool | None = None
    is_verified: bool | None = None
    role: Role | None = None


# --------------------------------------------------------------------------- #
# Output DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UserPrivateOut:
    """
    Every account field except the password hash.

    Returned to the account owner (login, refresh, ``/auth/me``) and to
    administrators.
    """

    id: int
    username: str
    email: str
    display_name: str
    bio: str | None
    profile_image_url: str | None
    header_image_url: str | None
    followers_count: int
    following_count: int
    is_verified: bool
    is_active: bool
    role: Role
    created_at: datetime | None
    updated_at: datetime | None

    @classmethod
    def from_model(cls, user: User) -> UserPrivateOut:
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            display_name=user.display_name,
            bio=user.bio,
            profile_image_url=user.profile_image_url,
            header_image_url=user.header_image_url,
            followers_count=user.followers_count,
            following_count=user.following_count,
            is_verified=user.is_verified,
            is_active=user.is_active,
            role=user.role,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


@dataclass(frozen=True, slots=True)
class UserProfileOut:
    """
    Public profile as seen by another (possibly anonymous) user.

    :param is_following: Whether the viewer follows this user; ``False`` for
        anonymous viewers and for the user's own profile.
    """

    id: int
    username: str
    display_name: str
    bio: str | None
    profile_image_url: str | None
    header_image_url: str | None
    followers_count: int
    following_count: int
    is_verified: bool
    created_at: datetime | None
    is_following: bool = False


@dataclass(frozen=True, slots=True)
class UserSummaryOut:
    """Compact author/follower card embedded in tweets and follow lists."""

    id: int
    username: str
    display_name: str
    profile_image_url: str | None
    is_verified: bool

    @classmethod
    def from_model(cls, user: User) -> UserSummaryOut:
        return cls(
            id=user.id,
            username=user.username,
            display_name=user.display_name,
            profile_image_url=user.profile_image_url,
            is_verified=user.is_verified,
        )
