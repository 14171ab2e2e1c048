"""Account group management commands."""

import click

from ledgerdesk.cli.context import parse_meta, repository, status_marker
from ledgerdesk.cli.error_handling import handle_domain_error
from ledgerdesk.domain.account_group import AccountGroupRepository
from ledgerdesk.domain.entities import AccountGroupDraft
from ledgerdesk.domain.errors import DomainError, NotFoundError, entity_not_found


@click.group()
def group_group():
    """Manage account groups."""
    pass


def _find_group(groups: AccountGroupRepository, group_id: int):
    groups.list()
    group = groups.find(group_id)
    if group is None:
        raise NotFoundError(entity_not_found("Account group", group_id))
    return group


@group_group.command("list")
@click.option("--only-active", is_flag=True, help="Hide inactive groups")
@click.option("--offset", type=int, default=0, show_default=True, help="Row offset")
@click.option("--limit", type=int, default=None, help="Page size (default 200)")
@click.pass_context
def list_groups(ctx, only_active: bool, offset: int, limit: int | None):
    """List account groups."""
    groups = repository(ctx, AccountGroupRepository)
    try:
        rows = groups.list(offset=offset, limit=limit, filters={"only_active": only_active or None})
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not rows:
        click.echo("No account groups found.")
        return

    click.echo("\nAccount groups:")
    click.echo("-" * 80)
    for group in rows:
        parent = f" | Parent: {group.parent_name or group.parent_id}" if group.parent_id else ""
        click.echo(
            f"ID: {str(group.id):>4} | {group.code:10s} | {group.name:30s} | {group.group_type or '-'}"
            f"{parent}{status_marker(group.register_status)}"
        )


@group_group.command("create")
@click.argument("code")
@click.argument("name")
@click.option("--type", "group_type", default="", help="Group type")
@click.option("--parent", "parent_id", help="Parent group ID")
@click.option("--meta", multiple=True, help="Metadata entry KEY=VALUE (repeatable)")
@click.pass_context
def create_group(ctx, code: str, name: str, group_type: str, parent_id: str | None, meta: tuple[str, ...]):
    """Create a new account group.

    Examples:
        ledgerdesk group create 1 "Activo" --type ACTIVO
        ledgerdesk group create 1.1 "Activo corriente" --parent 1
    """
    groups = repository(ctx, AccountGroupRepository)
    draft = AccountGroupDraft(
        code=code,
        name=name,
        group_type=group_type,
        parent_id=parent_id,
        metadata=parse_meta(meta) or None,
    )
    try:
        created = groups.create(draft)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if created is None:
        click.echo(f"Created account group '{name}'")
    else:
        click.echo(f"Created account group '{created.name}' (ID: {created.id})")


@group_group.command("update")
@click.argument("group_id", type=int)
@click.option("--code", help="New code")
@click.option("--name", help="New name")
@click.option("--type", "group_type", help="New group type")
@click.option("--parent", "parent_id", type=int, help="New parent group ID")
@click.option("--clear-parent", is_flag=True, help="Make this a root group")
@click.option("--meta", multiple=True, help="Replace metadata with KEY=VALUE entries (repeatable)")
@click.pass_context
def update_group(
    ctx,
    group_id: int,
    code: str | None,
    name: str | None,
    group_type: str | None,
    parent_id: int | None,
    clear_parent: bool,
    meta: tuple[str, ...],
) -> None:
    """Update an account group.

    Without --parent or --clear-parent the stored parent is left untouched.
    """
    if parent_id is not None and clear_parent:
        click.echo("Error: --parent and --clear-parent cannot be combined.", err=True)
        ctx.exit(1)

    groups = repository(ctx, AccountGroupRepository)
    try:
        current = _find_group(groups, group_id)
        draft = AccountGroupDraft(
            id=current.id,
            code=code if code is not None else current.code,
            name=name if name is not None else current.name,
            group_type=group_type if group_type is not None else current.group_type,
            parent_id=parent_id,
            clear_parent=clear_parent,
            register_status=current.register_status,
            metadata=parse_meta(meta) if meta else current.metadata,
            metadata_touched=bool(meta),
        )
        groups.update(draft)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated account group {group_id}")


@group_group.command("deactivate")
@click.argument("group_id", type=int)
@click.option("--reason", help="Reason recorded with the deactivation")
@click.pass_context
def deactivate_group(ctx, group_id: int, reason: str | None) -> None:
    """Deactivate an account group (soft delete)."""
    groups = repository(ctx, AccountGroupRepository)
    try:
        groups.deactivate(group_id, reason=reason)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Deactivated account group {group_id}")


def register_commands(cli):
    """Register account group commands with main CLI."""
    cli.add_command(group_group, name="group")
