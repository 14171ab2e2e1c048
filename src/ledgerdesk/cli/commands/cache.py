"""Overlay cache maintenance commands."""

import click

from ledgerdesk.database.overlay import ENTITY_TYPES
from ledgerdesk.domain.errors import PreconditionError, missing_session
from ledgerdesk.cli.error_handling import handle_domain_error


@click.group()
def cache_group():
    """Inspect or clear this session's overlay cache."""
    pass


def _session_key(ctx) -> str:
    session = ctx.obj["session"]
    if not session.session_id:
        raise PreconditionError(missing_session())
    return session.session_id


@cache_group.command("show")
@click.pass_context
def show_cache(ctx):
    """Show how many records this session has cached per entity."""
    cache = ctx.obj["cache"]
    try:
        session_key = _session_key(ctx)
    except PreconditionError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Session {session_key}:")
    for entity_type in ENTITY_TYPES:
        click.echo(f"  {entity_type:15s} {len(cache.read_all(session_key, entity_type))}")


@cache_group.command("clear")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def clear_cache(ctx, yes: bool):
    """Forget every record this session has cached."""
    cache = ctx.obj["cache"]
    try:
        session_key = _session_key(ctx)
    except PreconditionError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm("Clear the overlay cache for this session?"):
        click.echo("Cancelled.")
        return

    cache.clear(session_key)
    click.echo("Overlay cache cleared.")


def register_commands(cli):
    """Register cache commands with main CLI."""
    cli.add_command(cache_group, name="cache")
