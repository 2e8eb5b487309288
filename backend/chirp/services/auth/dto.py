# chirp/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass

from chirp.services.identity.dto import UserPrivateOut

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param identifier: Username or email.
    :type identifier: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    identifier: str
    password: str

    def __repr__(self) -> str:
        return f"LoginIn(identifier={self.identifier!r}, password='***')"


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    """

    refresh_token: str


@dataclass(frozen=True, slots=True)
class LogoutIn:
    """
    Input DTO for logout.

    :param access_token: Encoded access JWT taken from the bearer header.
    :type access_token: str
    """

    access_token: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Freshly minted tokens plus the authenticated user's projection.

    :param access_token: Encoded access JWT.
    :type access_token: str
    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    :param user: Account data without the password hash.
    :type user: UserPrivateOut
    """

    access_token: str
    refresh_token: str
    user: UserPrivateOut
