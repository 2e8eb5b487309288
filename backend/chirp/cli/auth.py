"""``flask auth``: maintenance commands for the session core."""

from __future__ import annotations

import click
from flask.cli import with_appcontext

from chirp.core.security import get_auth_service
from chirp.services._shared.errors import AuthError


@click.group("auth")
def auth_cli() -> None:
    """Token and revocation maintenance."""


@auth_cli.command("sweep")
@with_appcontext
def sweep_command() -> None:
    """Delete revocation entries whose tokens have already expired."""
    try:
        removed = get_auth_service().sweep_expired()
    except AuthError as exc:
        raise click.ClickException(f"Sweep failed: {exc.message}") from exc
    click.echo(f"Removed {removed} expired revocation(s).")
