"""``flask seed``: deterministic development accounts, tweets and follows."""

from __future__ import annotations

import logging

import click
from flask import current_app
from flask.cli import with_appcontext
from sqlalchemy.exc import SQLAlchemyError

from chirp.core.extensions import db
from chirp.seeds import seed_data

LOGGER = logging.getLogger(__name__)


def _echo_summary(summary: dict[str, dict[str, int]]) -> None:
    """Print one ``created``/``existing`` line per seeded table."""
    click.echo("Seed summary:")
    if not summary:
        click.echo("  (no changes)")
        return
    width = max(len(name) for name in summary)
    for table, counters in sorted(summary.items()):
        click.echo(
            f"  {table.ljust(width)}  created={counters.get('created', 0):>2}"
            f"  existing={counters.get('existing', 0):>2}"
        )


def _ensure_non_production() -> None:
    """Refuse destructive commands when ``APP_ENV`` is production."""
    app_env = str(current_app.config.get("APP_ENV", "")).lower()
    if app_env == "production" and not current_app.config.get("TESTING"):
        raise click.UsageError("'flask seed fresh' is disabled in production.")


def _run_seeders(verbose: bool) -> None:
    try:
        summary = seed_data.run_all(db, verbose=verbose)
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise click.ClickException(f"Seeding failed: {exc}") from exc
    _echo_summary(summary)
    click.echo("Log in with testuser / password123 or admin / adminpass123.")


@click.group("seed")
@click.option("--verbose", is_flag=True, help="Log each seeding step.")
@click.pass_context
def seed_cli(ctx: click.Context, verbose: bool) -> None:
    """Populate the database with development data."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    level = logging.DEBUG if verbose else logging.INFO
    for name in (seed_data.__name__, __name__):
        logging.getLogger(name).setLevel(level)


@seed_cli.command("run")
@click.pass_context
@with_appcontext
def run_command(ctx: click.Context) -> None:
    """Create missing tables, then add any missing fixtures."""
    db.create_all()
    _run_seeders(bool(ctx.obj.get("verbose", False)))


@seed_cli.command("fresh")
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt.")
@click.pass_context
@with_appcontext
def fresh_command(ctx: click.Context, yes: bool) -> None:
    """Drop every table, recreate the schema and seed from scratch."""
    _ensure_non_production()
    if not yes:
        click.confirm("This DROPS all tables and their data. Continue?", abort=True)
    LOGGER.info("seed.fresh.drop_schema")
    db.session.remove()
    db.drop_all()
    db.create_all()
    _run_seeders(bool(ctx.obj.get("verbose", False)))
