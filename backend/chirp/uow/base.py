"""
Unit of Work contract shared by the chirp services.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from chirp.repositories import (
        FollowRepository,
        RevokedTokenRepository,
        TweetRepository,
        UserRepository,
    )


class UnitOfWork(ABC):
    """
    One transactional boundary per use-case.

    Every repository below is bound to the same session, so a follow edge and
    both counter updates land (or roll back) together.
    """

    users: UserRepository
    tweets: TweetRepository
    follows: FollowRepository
    revoked_tokens: RevokedTokenRepository

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...
    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...
    @abstractmethod
    def commit(self) -> None: ...
    @abstractmethod
    def rollback(self) -> None: ...
