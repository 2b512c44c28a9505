"""Management commands for the scheduler backend application."""

from __future__ import annotations

import logging
import os
from typing import Optional

import click

from scheduler.db.seed import ensure_admin_user, ensure_default_settings, ensure_roles
from scheduler.db.session import create_tables, drop_tables

logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")


@click.group()
def cli() -> None:
    """Entry point for management commands."""


@cli.command("init_db")
@click.option("--reset", is_flag=True, help="Drop every table before creating it.")
def init_db(reset: bool) -> None:
    """Create the tables and seed the roles and default settings."""
    if reset:
        click.confirm("This deletes all data. Continue?", abort=True)
        drop_tables()
        logging.info("Tables dropped.")

    create_tables()
    ensure_roles()
    ensure_default_settings()
    logging.info("Database ready.")


@cli.command("ensure_admin")
@click.option("--username", default=None, help="Overrides ADMIN_USERNAME.")
@click.option("--password", default=None, help="Overrides ADMIN_PASSWORD.")
@click.option("--email", default=None, help="Overrides ADMIN_EMAIL.")
def ensure_admin(
    username: Optional[str], password: Optional[str], email: Optional[str]
) -> None:
    """Create an admin user unless the username is already taken."""
    username = username or os.getenv("ADMIN_USERNAME")
    password = password or os.getenv("ADMIN_PASSWORD")
    if not username or not password:
        raise click.ClickException(
            "ADMIN_USERNAME/ADMIN_PASSWORD are not set and no --username/--password provided."
        )
    email = email or os.getenv("ADMIN_EMAIL") or f"{username}@example.org"

    create_tables()
    user_id = ensure_admin_user(username, password, email)
    if user_id is None:
        logging.info("Username %s already exists; no changes made.", username)
    else:
        logging.info("Admin %s created (id=%s).", username, user_id)


if __name__ == "__main__":
    cli()
