"""Liveness endpoint reporting database and revocation ledger reachability."""

from __future__ import annotations

from flask import Blueprint, current_app
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from chirp.api.deps import json_response, timing
from chirp.core.extensions import db, get_redis

bp = Blueprint("health", __name__)


def _database_status() -> str:
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        current_app.logger.exception("healthcheck.db_error")
        db.session.rollback()
        return "fail"
    return "ok"


def _ledger_status(backend: str) -> str:
    if backend != "redis":
        return "ok"
    try:
        get_redis().ping()
    except (RedisError, RuntimeError):
        current_app.logger.exception("healthcheck.redis_error")
        return "fail"
    return "ok"


@bp.get("/health")
@timing
def healthcheck():
    """Return ``status`` plus the state of the stores behind the session core."""

    backend = str(current_app.config.get("REVOCATION_BACKEND", "database")).lower()
    payload = {
        "status": "ok",
        "db": _database_status(),
        "revocation": {"backend": backend, "status": _ledger_status(backend)},
        "version": current_app.config.get("APP_VERSION", "dev"),
    }
    return json_response(payload)
