"""Tweet model."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from chirp.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:  # pragma: no cover
    from .user import User


class Tweet(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Short text post authored by a :class:`~chirp.models.user.User`.

    Fields
    ------
    content : str
        Trimmed body, 1 to ``TWEET_MAX_LENGTH`` characters (enforced by the
        service and API schema).
    user_id : int
        Author id; tweets are deleted together with their author.
    """

    __tablename__ = "tweets"

    content: Mapped[str] = mapped_column(String(280), nullable=False)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    author: Mapped[User] = relationship("User", lazy="joined", passive_deletes=True)

    __table_args__ = (Index("ix_tweets_user_id_id", "user_id", "id"),)

    @validates("content")
    def _strip_content(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Tweet content is required.")
        return value.strip()
