"""API package: mounts the versioned blueprints and per-request auth state."""

from __future__ import annotations

from collections.abc import Iterable

from flask import Blueprint, Flask, g


def _join_prefix(*segments: str) -> str:
    parts = [segment.strip("/") for segment in segments if segment.strip("/")]
    return "/" + "/".join(parts)


def register_blueprint_group(
    app: Flask,
    *,
    base_prefix: str,
    entries: Iterable[tuple[Blueprint, str]],
) -> None:
    """Mount ``(blueprint, relative_prefix)`` pairs beneath ``base_prefix``.

    An empty relative prefix mounts the blueprint at the version root, which
    is where ``/health`` lives.
    """

    for bp, rel_prefix in entries:
        app.register_blueprint(bp, url_prefix=_join_prefix(base_prefix, rel_prefix))


def init_app(app: Flask) -> None:
    """Register ``/api/v1`` and clear auth state left over on :data:`flask.g`."""

    from chirp.api.v1 import API_VERSION, REGISTRY

    api_base = app.config.get("API_BASE_PREFIX", "/api")
    register_blueprint_group(app, base_prefix=f"{api_base}/{API_VERSION}", entries=REGISTRY)

    @app.before_request
    def _reset_claims() -> None:
        # ``g`` outlives the request when an app context was already pushed
        g.pop("claims", None)


__all__ = ["init_app", "register_blueprint_group"]
