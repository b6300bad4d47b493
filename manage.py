"""Management commands for the Pi Odonto application."""

from __future__ import annotations

import logging
from typing import Optional

import click

from odonto.core.config import get_admin_credentials
from odonto.core.logging_config import get_logger
from odonto.db.seed import ensure_admin_user, seed_work_schedules
from odonto.db.session import create_tables
from odonto.main import create_app

logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
logger = get_logger(__name__)

# Create the Flask application once so commands can share configuration.
app = create_app()


@click.group()
def cli() -> None:
    """Entry point for management commands."""


@cli.command("init-db")
def init_db() -> None:
    """Create every table that does not exist yet."""
    with app.app_context():
        create_tables()
    click.echo("Database tables created.")


@cli.command("ensure-admin")
@click.option(
    "--email",
    "email_override",
    default=None,
    help="Admin e-mail. Overrides the ADMIN_EMAIL environment variable.",
)
@click.option(
    "--password",
    "password_override",
    default=None,
    help="Admin password. Overrides the ADMIN_PASSWORD environment variable.",
)
def ensure_admin(
    email_override: Optional[str], password_override: Optional[str]
) -> None:
    """Create the administrator account, or promote and re-activate it."""
    env_email, env_password = get_admin_credentials()
    email = email_override or env_email
    password = password_override or env_password
    if not email or not password:
        raise click.ClickException(
            "ADMIN_EMAIL and ADMIN_PASSWORD must be set (or pass --email/--password)."
        )

    with app.app_context():
        changed = ensure_admin_user(email, password)

    if changed:
        click.echo(f"Admin account {email} is ready.")
    else:
        click.echo(f"Admin account {email} already configured; no changes made.")


@cli.command("seed-schedules")
def seed_schedules() -> None:
    """Create the default work schedules."""
    with app.app_context():
        created = seed_work_schedules()
    if created:
        click.echo(f"Created work schedules: {', '.join(created)}")
    else:
        click.echo("Work schedules already present.")
    logger.info("Schedule seeding finished", extra={"context": {"created": created}})


if __name__ == "__main__":
    cli()
