"""Command-line interface for SchoolBase.

This module provides the CLI commands for running and managing
the SchoolBase application.
"""

import asyncio
from typing import NoReturn

import click

from schoolbase.core.config import get_settings
from schoolbase.core.logging import configure_logging, get_logger


@click.group()
@click.version_option(version="0.1.0", prog_name="SchoolBase")
def cli() -> None:
    """SchoolBase - Multi-school management backend.

    Configuration is read from SCHOOLBASE_* environment variables and .env.
    """


@cli.command()
@click.option("--host", type=str, default=None, help="Host to bind to (overrides config)")
@click.option("--port", type=int, default=None, help="Port to bind to (overrides config)")
@click.option(
    "--workers",
    type=int,
    default=None,
    help="Number of worker processes (overrides config)",
)
@click.option(
    "--reload",
    is_flag=True,
    default=False,
    help="Enable auto-reload for development",
)
def serve(host: str | None, port: int | None, workers: int | None, reload: bool) -> None:
    """Start the SchoolBase server."""
    import uvicorn

    settings = get_settings()

    bind_host = host or settings.host
    bind_port = port or settings.port
    bind_workers = workers or settings.workers

    if bind_workers > 1 and settings.database_url.startswith("sqlite"):
        click.echo(
            "ERROR: SQLite does not support multiple worker processes. "
            "Use --workers 1 or switch to PostgreSQL.",
            err=True,
        )
        raise SystemExit(1)

    configure_logging(settings)
    logger = get_logger(__name__)
    logger.info(
        "Starting SchoolBase server",
        host=bind_host,
        port=bind_port,
        workers=bind_workers,
        reload=reload,
        environment=settings.environment,
    )

    uvicorn.run(
        "schoolbase.infrastructure.api.app:app",
        host=bind_host,
        port=bind_port,
        workers=1 if reload else bind_workers,
        reload=reload,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


@cli.command()
@click.option("--force", is_flag=True, help="Skip confirmation prompt")
def init_db(force: bool) -> None:
    """Initialize the database.

    Creates all database tables. Use this only in development.
    In production, use migrations instead.
    """
    from schoolbase.infrastructure.persistence.database import (
        get_db_manager,
        init_database,
    )

    settings = get_settings()
    configure_logging(settings)

    if settings.is_production and not force:
        click.echo(
            "ERROR: Running in production mode. Use migrations instead of init-db.",
            err=True,
        )
        raise SystemExit(1)

    if not force:
        click.confirm(
            "This will create all database tables. Continue?",
            abort=True,
            default=False,
        )

    async def initialize():
        try:
            await init_database()
            click.echo("Database initialized successfully.")
        finally:
            await get_db_manager().disconnect()

    asyncio.run(initialize())


@cli.command()
@click.option("--email", type=str, default=None, help="Superadmin email (prompts if not provided)")
@click.option(
    "--password",
    type=str,
    default=None,
    help="Superadmin password (prompts if not provided)",
)
@click.option("--first-name", type=str, default=None)
@click.option("--last-name", type=str, default=None)
def create_superadmin(
    email: str | None,
    password: str | None,
    first_name: str | None,
    last_name: str | None,
) -> None:
    """Create a verified superadmin.

    Running the command again with an existing email leaves that account
    untouched.
    """
    from schoolbase.domain.services import SuperadminCreationError, SuperadminService
    from schoolbase.infrastructure.persistence.database import get_db_manager
    from schoolbase.infrastructure.persistence.repositories import UserRepository

    configure_logging(get_settings())
    logger = get_logger(__name__)

    if email is None:
        email = click.prompt("Superadmin email", type=str)
    if "@" not in email or "." not in email.split("@")[-1]:
        click.echo("Error: Invalid email format", err=True)
        raise SystemExit(1)

    async def create() -> None:
        nonlocal password
        db = get_db_manager()
        try:
            async with db.session() as session:
                existing = await UserRepository(session).get_by_email(email)
            if existing is not None:
                click.echo(f"An account with email '{email}' already exists. Nothing to do.")
                return

            if password is None:
                password = click.prompt(
                    "Superadmin password",
                    hide_input=True,
                    confirmation_prompt=True,
                )

            try:
                async with db.session() as session:
                    user_id = await SuperadminService.create_superadmin(
                        email=email,
                        password=password,
                        session=session,
                        first_name=first_name,
                        last_name=last_name,
                    )
            except SuperadminCreationError as e:
                click.echo(f"Error: {e.message}", err=True)
                logger.error("Superadmin creation failed", error=e.message)
                raise SystemExit(1) from e

            click.echo(
                f"\nSuperadmin created successfully!\n"
                f"  User ID: {user_id}\n"
                f"  Email:   {email}\n"
            )
            logger.info("Superadmin created via CLI", user_id=user_id, email=email)
        finally:
            await db.disconnect()

    asyncio.run(create())


@cli.command()
def backfill_student_ids() -> None:
    """Assign student IDs to students that have none."""
    from schoolbase.domain.services import UserService
    from schoolbase.infrastructure.persistence.database import get_db_manager

    configure_logging(get_settings())

    async def backfill() -> None:
        db = get_db_manager()
        try:
            async with db.session() as session:
                assigned = await UserService(session).backfill_student_ids()
            if not assigned:
                click.echo("All students already have a student ID.")
                return
            for student, student_id in assigned:
                click.echo(f"  {student.email} -> {student_id}")
            click.echo(f"\nAssigned {len(assigned)} student ID(s).")
        finally:
            await db.disconnect()

    asyncio.run(backfill())


@cli.command()
def school_validity() -> None:
    """Report every school's expiry status and days remaining."""
    from schoolbase.domain.services import SchoolService
    from schoolbase.infrastructure.persistence.database import get_db_manager

    configure_logging(get_settings())

    async def report() -> None:
        db = get_db_manager()
        try:
            async with db.session() as session:
                entries = await SchoolService(session).validity_report()
        finally:
            await db.disconnect()

        if not entries:
            click.echo("No schools found.")
            return
        for entry in entries:
            status = "EXPIRED" if entry.expired else "active"
            click.echo(
                f"{entry.school_number}  {entry.name:<40} {status:<8} "
                f"valid until {entry.valid_until:%Y-%m-%d}  "
                f"({entry.days_remaining} days remaining)"
            )

    asyncio.run(report())


@cli.command()
def seed_subjects() -> None:
    """Add the standard junior and senior subject catalogue.

    Subjects that already exist are skipped, so the command can be re-run.
    """
    from schoolbase.domain.services import SubjectService
    from schoolbase.infrastructure.persistence.database import get_db_manager

    configure_logging(get_settings())

    async def seed() -> None:
        db = get_db_manager()
        try:
            async with db.session() as session:
                created, skipped = await SubjectService(session).seed_standard_subjects()
        finally:
            await db.disconnect()
        click.echo(f"Seeded subjects: {created} created, {skipped} already present.")

    asyncio.run(seed())


@cli.command()
def info() -> None:
    """Display SchoolBase configuration and system information."""
    settings = get_settings()

    click.echo(f"""
SchoolBase v{settings.app_version}
{'=' * 40}

Configuration:
  Environment:  {settings.environment}
  Debug:        {settings.debug}
  API Prefix:   {settings.api_prefix}

Server:
  Host:         {settings.host}
  Port:         {settings.port}
  Workers:      {settings.workers}

Database:
  URL:          {settings.database_url}
  Pool Size:    {settings.db_pool_size}
  Echo:         {settings.db_echo}

Security:
  Token TTL:    {settings.session_ttl_minutes or 'none'} minutes
  2FA TTL:      {settings.two_factor_ttl_minutes} minutes

Schools:
  Validity:     {settings.school_validity_months} months
  Max Students: {settings.default_max_students}
  Max Teachers: {settings.default_max_teachers}

Mail:
  SMTP Host:    {settings.smtp_host or 'not configured (console)'}

Logging:
  Level:        {settings.log_level}
  Format:       {settings.log_format}
""")


def main() -> NoReturn:
    """Main entry point for the CLI.

    This function is called when the `schoolbase` command is run
    or when using `python -m schoolbase`.
    """
    cli()


if __name__ == "__main__":
    main()
