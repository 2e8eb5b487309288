"""Revocation ledger rows for logged-out tokens."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from chirp.core.extensions import db

from .base import CreatedAtMixin, PKMixin, ReprMixin


class RevokedToken(PKMixin, ReprMixin, CreatedAtMixin, db.Model):
    """
    A token string that must be refused until it expires naturally.

    Fields
    ------
    token : str
        The exact encoded token, unique across the table.
    expires_at : datetime
        The token's own ``exp``; rows older than this are swept.
    """

    __tablename__ = "token_blacklist"

    token: Mapped[str] = mapped_column(String(1024), nullable=False, unique=True)
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )

    def __repr__(self) -> str:
        # Never print the token itself
        return f"<RevokedToken id={self.id} expires_at={self.expires_at}>"
