"""Repository for the ``token_blacklist`` table."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, select

from chirp.models.revoked_token import RevokedToken
from chirp.repositories.base import BaseRepository


class RevokedTokenRepository(BaseRepository[RevokedToken]):
    """Exact-match storage of revoked token strings."""

    model = RevokedToken

    def exists_token(self, token: str) -> bool:
        stmt = select(RevokedToken.id).where(RevokedToken.token == token)
        return self.session.execute(stmt.limit(1)).first() is not None

    def delete_expired(self, now: datetime) -> int:
        """Delete every row whose ``expires_at`` is strictly before ``now``.

        :returns: Number of rows removed.
        """
        result = self.session.execute(
            delete(RevokedToken)
            .where(RevokedToken.expires_at < now)
            .execution_options(synchronize_session=False)
        )
        return int(result.rowcount or 0)
