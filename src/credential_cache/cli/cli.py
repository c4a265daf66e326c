"""Main CLI implementation."""

from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from ..audit import EventType, audit_event, setup_logging
from ..config import CacheSettings
from ..exceptions import InternalError
from ..manager import CredentialManager, initialize_credential_manager
from ..storage import detect_os

console = Console()


def print_table(title: str, rows: list[dict], columns: list[tuple[str, str]]) -> None:
    """Print data in a formatted table.

    Args:
        title: Table title
        rows: List of row dictionaries
        columns: List of (key, header) tuples defining columns
    """
    table = Table(title=title)
    for _, header in columns:
        table.add_column(header, style="cyan")

    for row in rows:
        table.add_row(*[str(row.get(key, "")) for key, _ in columns])

    console.print(table)


def _manager(ctx: click.Context) -> CredentialManager:
    return initialize_credential_manager(ctx.obj["settings"])


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Set logging level",
)
@click.option(
    "--log-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory for the log file",
)
@click.pass_context
def cli(ctx: click.Context, log_level: Optional[str], log_dir: Optional[Path]) -> None:
    """Credential cache CLI.

    Inspect and manage id tokens cached in the OS secure storage.
    """
    overrides = {}
    if log_level is not None:
        overrides["log_level"] = log_level
    if log_dir is not None:
        overrides["log_dir"] = log_dir
    settings = CacheSettings(**overrides)

    setup_logging(log_level=settings.log_level, base_dir=settings.log_dir)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show the selected storage backend."""
    manager = _manager(ctx)
    settings: CacheSettings = ctx.obj["settings"]
    requested = getattr(settings.backend, "value", settings.backend)
    rows = [
        {"setting": "Operating system", "value": detect_os().value},
        {"setting": "Requested backend", "value": requested},
        {"setting": "Backend", "value": manager.backend_kind.value},
        {"setting": "State", "value": "active" if manager.is_active else "inert"},
    ]
    print_table("Credential Cache", rows, [("setting", "Setting"), ("value", "Value")])
    audit_event(
        event_type=EventType.BACKEND_SELECT,
        user="cli",
        success=True,
        details={"backend": manager.backend_kind.value},
    )


@cli.command()
@click.argument("url")
@click.argument("user")
@click.pass_context
def get(ctx: click.Context, url: str, user: str) -> None:
    """Print the token cached for URL and USER."""
    try:
        token = _manager(ctx).get(url, user)
    except InternalError as e:
        audit_event(event_type=EventType.ERROR_CRED, user=user, success=False, error=e)
        raise click.ClickException(str(e))

    audit_event(
        event_type=EventType.CRED_READ,
        user=user,
        success=token is not None,
        details={"url": url},
    )
    if token is None:
        raise click.ClickException(f"No cached token for {user} at {url}")
    click.echo(token)


@cli.command()
@click.argument("url")
@click.argument("user")
@click.option(
    "--token",
    prompt=True,
    hide_input=True,
    help="Token to cache (prompted if omitted)",
)
@click.pass_context
def store(ctx: click.Context, url: str, user: str, token: str) -> None:
    """Cache a token for URL and USER."""
    manager = _manager(ctx)
    try:
        written = manager.set(url, user, token)
    except InternalError as e:
        audit_event(event_type=EventType.ERROR_CRED, user=user, success=False, error=e)
        raise click.ClickException(str(e))

    audit_event(
        event_type=EventType.CRED_WRITE,
        user=user,
        success=written,
        details={"url": url},
    )
    if written:
        click.echo(f"Cached token for {user}")
    elif not manager.is_active:
        click.echo("Secure storage is unavailable; nothing was cached.")
    elif not token:
        click.echo("Empty token; nothing was cached.")
    else:
        click.echo("Could not write to secure storage; nothing was cached.")


@cli.command()
@click.argument("host")
@click.argument("user")
@click.pass_context
def delete(ctx: click.Context, host: str, user: str) -> None:
    """Delete the token cached for HOST and USER."""
    _manager(ctx).delete_credential(host, user)
    audit_event(
        event_type=EventType.CRED_DELETE,
        user=user,
        success=True,
        details={"host": host},
    )
    click.echo(f"Deleted cached token for {user} at {host}")


def main() -> None:
    """CLI entry point."""
    cli(obj={})
