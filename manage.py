"""Management commands for the tool tracker."""

from __future__ import annotations

import json
import logging
from typing import Optional

import click

from tool_tracker.core import config
from tool_tracker.core.logging_config import setup_logging
from tool_tracker.core.validation import is_valid_uuid
from tool_tracker.db.seed import ensure_system_actor_user
from tool_tracker.db.session import SessionLocal, create_tables
from tool_tracker.repositories import EventRepository, ToolRepository, UserRepository
from tool_tracker.services import StatsService

logger = logging.getLogger("tool_tracker.manage")


@click.group()
@click.option("--log-level", default=None, help="Override LOG_LEVEL for this run.")
def cli(log_level: Optional[str]) -> None:
    """Entry point for management commands."""
    setup_logging(
        log_level=log_level or config.LOG_LEVEL,
        enable_sql_echo=config.SQL_ECHO,
        log_to_file=config.LOG_TO_FILE,
        use_json_format=config.LOG_JSON,
    )
    config.log_config()


@cli.command("init-db")
@click.option(
    "--skip-seed",
    is_flag=True,
    default=False,
    help="Create tables without seeding the system actor user.",
)
def init_db(skip_seed: bool) -> None:
    """Create all tables and seed the system actor user."""
    create_tables()
    logger.info("Database tables created")

    if skip_seed:
        return

    session = SessionLocal()
    try:
        user = ensure_system_actor_user(session)
        click.echo(f"System actor ready: {user.id} ({user.email})")
    finally:
        session.close()


@cli.command("ensure-system-actor")
@click.option(
    "--actor-id",
    default=None,
    help="UUID of the system actor. Overrides SYSTEM_ACTOR_ID environment variable.",
)
def ensure_system_actor(actor_id: Optional[str]) -> None:
    """Create the system actor user if missing and make sure it is an admin."""
    if actor_id is not None and not is_valid_uuid(actor_id):
        raise click.ClickException(f"'{actor_id}' is not a valid UUID.")

    session = SessionLocal()
    try:
        user = ensure_system_actor_user(session, actor_id)
        click.echo(f"System actor ready: {user.id} ({user.email})")
    finally:
        session.close()


@cli.command("stats")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print stats as JSON.")
def stats(as_json: bool) -> None:
    """Print tool, user and event counts."""
    session = SessionLocal()
    try:
        service = StatsService(
            ToolRepository(session), UserRepository(session), EventRepository(session)
        )
        result = service.get_stats()
    finally:
        session.close()

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    click.echo(f"Tools:  {result.total_tools}")
    for status, count in result.tools_by_status.items():
        click.echo(f"  {status:<12} {count}")
    click.echo(f"Users:  {result.total_users}")
    for role, count in result.users_by_role.items():
        click.echo(f"  {role:<12} {count}")
    click.echo(f"Events: {result.total_events}")


if __name__ == "__main__":
    cli()
