"""Main CLI entry point."""

import json
import logging
import os
from pathlib import Path

import click

from ledgerdesk.database.factories import create_sqlite_store
from ledgerdesk.database.overlay import OverlayCache
from ledgerdesk.domain.session import ActorSession, ingest_session
from ledgerdesk.remote.http import create_http_backend

from ledgerdesk.cli.commands import (
    account,
    account_group,
    cache,
    cost_center,
    transaction,
)

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def load_session(session_file: str | None) -> ActorSession:
    """Read the stored login response.

    Falls back to LEDGERDESK_SESSION_FILE, then ~/.ledgerdesk/session.json.
    A missing file yields a session without id, which every command rejects.
    """
    if session_file is None:
        session_file = os.environ.get("LEDGERDESK_SESSION_FILE")
    path = Path(session_file) if session_file else Path.home() / ".ledgerdesk" / "session.json"

    if not path.exists():
        logger.debug("No session file at %s", path)
        return ingest_session(None)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except ValueError as e:
        raise click.ClickException(f"Session file {path} is not valid JSON: {e}")
    # Some consoles persist the whole login answer under "data"
    if isinstance(raw, dict) and isinstance(raw.get("data"), dict) and "id_sesion" not in raw:
        raw = raw["data"]
    return ingest_session(raw if isinstance(raw, dict) else None)


@click.group()
@click.option(
    "--api-url",
    help="Backend base URL (overrides LEDGERDESK_API_URL environment variable)",
    envvar="LEDGERDESK_API_URL",
)
@click.option(
    "--cache-path",
    type=click.Path(),
    help="Path to overlay cache file (overrides LEDGERDESK_CACHE_PATH environment variable)",
    envvar="LEDGERDESK_CACHE_PATH",
)
@click.option(
    "--session-file",
    type=click.Path(),
    help="Path to the stored login response (overrides LEDGERDESK_SESSION_FILE)",
    envvar="LEDGERDESK_SESSION_FILE",
)
@click.option("--verbose", "-v", is_flag=True, help="Log requests and cache activity to stderr")
@click.pass_context
def cli(ctx, api_url: str | None, cache_path: str | None, session_file: str | None, verbose: bool):
    """Ledgerdesk - accounting back-office console.

    Maintain the chart of accounts, account groups and cost centers, and
    record balanced double-entry transactions against the remote ledger.
    """
    ctx.ensure_object(dict)

    if verbose:
        ctx.obj["verbose"] = True
        logging.basicConfig(level=logging.DEBUG, format=LOG_FORMAT)

    # Collaborators are built only when running a command (not for --help);
    # anything already in ctx.obj is kept
    if ctx.invoked_subcommand is not None:
        if "backend" not in ctx.obj:
            ctx.obj["backend"] = create_http_backend(api_url)
        if "cache" not in ctx.obj:
            store = ctx.obj.get("store") or create_sqlite_store(cache_path)
            store.connect()
            ctx.obj["store"] = store
            ctx.obj["cache"] = OverlayCache(store)
        if "session" not in ctx.obj:
            ctx.obj["session"] = load_session(session_file)


# Register all commands
account.register_commands(cli)
account_group.register_commands(cli)
cost_center.register_commands(cli)
transaction.register_commands(cli)
cache.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
