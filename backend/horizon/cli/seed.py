"""Flask CLI commands for demo database seeding."""

from __future__ import annotations

import logging

import click
from flask import current_app
from flask.cli import with_appcontext

from horizon.core.extensions import db
from horizon.seeds import demo_data
from horizon.services._shared.errors import ServiceError

LOGGER = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    """Raise logging verbosity for seed modules when requested."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.getLogger(demo_data.__name__).setLevel(level)
    LOGGER.setLevel(level)


def _echo_summary(summary: dict[str, dict[str, int]]) -> None:
    """Pretty-print a tabular summary of seed results."""
    click.echo("Seed summary:")
    if not summary:
        click.echo("  (no changes)")
        return
    width = max(len(name) for name in summary)
    for table, counters in sorted(summary.items()):
        created = counters.get("created", 0)
        existing = counters.get("existing", 0)
        click.echo(f"  {table.ljust(width)}  created={created:>2}  existing={existing:>2}")


def _ensure_non_production() -> None:
    """Abort seeding when running in production."""
    if str(current_app.config.get("APP_ENV", "")).lower() == "production":
        raise click.UsageError("The 'flask seed' commands are restricted to non-production environments.")


@click.group("seed")
@click.option("--verbose", is_flag=True, help="Enable verbose logging for seeding.")
@click.pass_context
def seed_cli(ctx: click.Context, verbose: bool) -> None:
    """Collection of database seeding commands."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    _configure_logging(verbose)


@seed_cli.command("demo")
@click.option("--fresh", is_flag=True, help="Drop and recreate all tables first.")
@click.option("--yes", is_flag=True, help="Skip the destructive confirmation prompt.")
@click.pass_context
@with_appcontext
def demo_command(ctx: click.Context, fresh: bool, yes: bool) -> None:
    """Populate the database with demo users, posts, likes and follows."""
    _ensure_non_production()
    if fresh:
        if not yes:
            click.confirm(
                "This will DROP all application tables and recreate them. Continue?",
                abort=True,
            )
        LOGGER.info("Recreating database schema...")
        db.session.remove()
        db.drop_all()
        db.create_all()
    verbose = bool(ctx.obj.get("verbose", False))
    try:
        summary = demo_data.run_all(db, verbose=verbose)
    except ServiceError as exc:
        db.session.rollback()
        raise click.ClickException(f"Seeding failed: {exc}") from exc
    _echo_summary(summary)
