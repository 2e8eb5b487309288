"""Follow edge between two users."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from chirp.core.extensions import db

from .base import CreatedAtMixin, PKMixin, ReprMixin

if TYPE_CHECKING:  # pragma: no cover
    from .user import User


class Follow(PKMixin, ReprMixin, CreatedAtMixin, db.Model):
    """
    Directed edge ``follower -> following``.

    A pair is unique and a user can never follow themselves.
    """

    __tablename__ = "follows"

    follower_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    following_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    follower: Mapped[User] = relationship(
        "User", foreign_keys=[follower_id], lazy="joined", passive_deletes=True
    )
    following: Mapped[User] = relationship(
        "User", foreign_keys=[following_id], lazy="joined", passive_deletes=True
    )

    __table_args__ = (
        UniqueConstraint("follower_id", "following_id", name="uq_follows_pair"),
        CheckConstraint("follower_id <> following_id", name="no_self_follow"),
        Index("ix_follows_following_id", "following_id"),
    )
