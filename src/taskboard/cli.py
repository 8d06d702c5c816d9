"""CLI entry point for taskboard.

This module provides the command-line interface for running the HTTP API
and preparing its configuration and database.

Usage:
    taskboard serve                    # Start the HTTP API
    taskboard init-config              # Create config file
    taskboard init-db                  # Create the database schema
    taskboard check-db                 # Verify the database is usable
    taskboard --version                # Show version
    taskboard --help                   # Show help
"""

import asyncio
import contextlib
import sys
from pathlib import Path
from typing import Any

import click

from taskboard import __version__
from taskboard.config import Settings, get_config_path, load_settings_with_toml


def get_default_config() -> dict[str, Any]:
    """Get default configuration for init-config.

    Returns:
        Default configuration dictionary
    """
    return {
        "database": {
            "path": "~/.local/share/taskboard/taskboard.db",
        },
        "server": {
            "host": "127.0.0.1",
            "port": 8080,
        },
        "security": {
            "jwt_secret_key": "change-me",
            "jwt_expiration_minutes": 1440,
            "bcrypt_rounds": 12,
        },
        "paging": {
            "default_size": 5,
            "max_size": 100,
        },
        "logging": {
            "level": "INFO",
            "format": "json",
        },
        "metrics": {
            "enabled": True,
        },
    }


class ErrorCategory:
    """Error categories for clear error messages."""

    CONFIGURATION = "configuration"
    DATABASE = "database"
    VALIDATION = "validation"
    INTERNAL = "internal"


def format_error(category: str, message: str, remediation: str) -> str:
    """Format error with category and remediation.

    Args:
        category: Error category
        message: Error message
        remediation: Suggested fix

    Returns:
        Formatted error string
    """
    return f"""
Error [{category.upper()}]: {message}

Remediation: {remediation}
"""


def load_cli_settings(options: dict[str, Any], **overrides: Any) -> Settings:
    """Build settings from the group options plus command-specific overrides."""
    config_path = options.get("config_path")
    try:
        return load_settings_with_toml(
            Path(config_path) if config_path else None,
            log_level=options.get("log_level"),
            **overrides,
        )
    except ValueError as e:
        click.echo(
            format_error(
                ErrorCategory.CONFIGURATION,
                "Invalid configuration",
                f"Check the config file and TASKBOARD_* environment variables.\n\nDetails: {e}",
            ),
            err=True,
        )
        sys.exit(1)


@click.group(invoke_without_command=True)
@click.option(
    "--config",
    type=click.Path(exists=False),
    help="Override global config file path",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Override log level",
)
@click.version_option(version=__version__, prog_name="taskboard")
@click.pass_context
def main(ctx: click.Context, config: str | None, log_level: str | None) -> None:
    """Taskboard task-management REST API.

    Configuration is loaded from (in priority order):
    1. CLI arguments
    2. Environment variables (TASKBOARD_*)
    3. Global config file (~/.config/taskboard/config.toml)
    4. Built-in defaults

    Running without a subcommand starts the server.
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config
    ctx.obj["log_level"] = log_level

    if ctx.invoked_subcommand is None:
        ctx.invoke(serve)


@main.command()
@click.option("--host", type=str, help="Bind address (overrides config)")
@click.option("--port", type=int, help="Port (overrides config)")
@click.pass_context
def serve(ctx: click.Context, host: str | None = None, port: int | None = None) -> None:
    """Start the HTTP API server."""
    import uvicorn

    from taskboard.api.http_server import create_app
    from taskboard.utils.logging import get_logger, setup_logging

    settings = load_cli_settings(ctx.obj, http_host=host, http_port=port)
    setup_logging(settings)
    logger = get_logger(__name__)

    if settings.uses_default_secret:
        click.echo(
            "Warning: the built-in JWT signing key is in use. Set security.jwt_secret_key "
            "or TASKBOARD_JWT_SECRET_KEY before exposing this server.",
            err=True,
        )

    logger.info("starting_taskboard", version=__version__, host=settings.http_host, port=settings.http_port)
    app = create_app(settings)
    try:
        uvicorn.run(app, host=settings.http_host, port=settings.http_port, log_level="warning")
    except KeyboardInterrupt:
        logger.info("taskboard_interrupted")


@main.command()
@click.pass_context
def init_config(ctx: click.Context) -> None:
    """Create global configuration file with defaults.

    Creates the configuration file at ~/.config/taskboard/config.toml
    (or %APPDATA%/taskboard/config.toml on Windows).

    The file is created with restrictive permissions (600) to protect
    the token signing key.
    """
    import tomli_w

    config_path = Path(ctx.obj.get("config_path") or get_config_path())

    if config_path.exists():
        click.echo(f"Config file already exists: {config_path}")
        if not click.confirm("Overwrite?"):
            sys.exit(0)

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "wb") as f:
        tomli_w.dump(get_default_config(), f)

    # chmod may not be supported on Windows
    with contextlib.suppress(OSError):
        config_path.chmod(0o600)

    click.echo(f"Created config file: {config_path}")
    click.echo()
    click.echo("Next steps:")
    click.echo("  1. Replace security.jwt_secret_key with a long random value")
    click.echo("  2. Create the database: taskboard init-db")
    click.echo("  3. Start the server: taskboard serve")


@main.command()
@click.pass_context
def init_db(ctx: click.Context) -> None:
    """Create the database file and schema if missing."""
    settings = load_cli_settings(ctx.obj)
    asyncio.run(_open_database(settings, probe=False))


@main.command()
@click.pass_context
def check_db(ctx: click.Context) -> None:
    """Verify the database can be opened and queried.

    Returns exit code 0 if the check passes, 1 otherwise.
    """
    settings = load_cli_settings(ctx.obj)
    asyncio.run(_open_database(settings, probe=True))


async def _open_database(settings: Settings, probe: bool) -> None:
    import aiosqlite

    from taskboard.storage import Database

    path = settings.resolved_database_path
    if probe:
        click.echo(f"SQLite ({path})... ", nl=False)
        if not path.exists():
            click.echo(click.style("MISSING", fg="yellow"))
            click.echo(format_error(ErrorCategory.DATABASE, f"No database at {path}", "Run: taskboard init-db"), err=True)
            sys.exit(1)

    database = Database(path)
    try:
        await database.initialize()
        healthy = await database.health_check()
    except (aiosqlite.Error, OSError) as e:
        if probe:
            click.echo(click.style("FAILED", fg="red"))
        click.echo(
            format_error(
                ErrorCategory.DATABASE,
                f"Cannot open database at {path}",
                f"Check that the directory exists and is writable.\n\nDetails: {e}",
            ),
            err=True,
        )
        sys.exit(1)
    finally:
        await database.close()

    if not probe:
        click.echo(f"Database ready: {path}")
        return

    if healthy:
        click.echo(click.style("OK", fg="green"))
        sys.exit(0)
    click.echo(click.style("FAILED", fg="red"))
    sys.exit(1)


if __name__ == "__main__":
    main()
