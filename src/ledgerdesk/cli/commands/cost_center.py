"""Cost center management commands."""

import click

from ledgerdesk.cli.context import parse_meta, repository, status_marker
from ledgerdesk.cli.error_handling import handle_domain_error
from ledgerdesk.domain.cost_center import CostCenterRepository
from ledgerdesk.domain.entities import CostCenterDraft
from ledgerdesk.domain.errors import DomainError, NotFoundError, entity_not_found


@click.group()
def cost_center_group():
    """Manage cost centers."""
    pass


@cost_center_group.command("list")
@click.option("--only-active", is_flag=True, help="Hide inactive cost centers")
@click.option("--offset", type=int, default=0, show_default=True, help="Row offset")
@click.option("--limit", type=int, default=None, help="Page size (default 200)")
@click.pass_context
def list_cost_centers(ctx, only_active: bool, offset: int, limit: int | None):
    """List cost centers."""
    centers = repository(ctx, CostCenterRepository)
    try:
        rows = centers.list(offset=offset, limit=limit, filters={"only_active": only_active or None})
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not rows:
        click.echo("No cost centers found.")
        return

    click.echo("\nCost centers:")
    click.echo("-" * 60)
    for center in rows:
        click.echo(f"ID: {str(center.id):>4} | {center.code:10s} | {center.name}{status_marker(center.register_status)}")


@cost_center_group.command("create")
@click.argument("code")
@click.argument("name")
@click.option("--meta", multiple=True, help="Metadata entry KEY=VALUE (repeatable)")
@click.pass_context
def create_cost_center(ctx, code: str, name: str, meta: tuple[str, ...]):
    """Create a new cost center.

    Examples:
        ledgerdesk cost-center create CC-01 "Administración"
    """
    centers = repository(ctx, CostCenterRepository)
    draft = CostCenterDraft(code=code, name=name, metadata=parse_meta(meta) or None)
    try:
        created = centers.create(draft)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if created is None:
        click.echo(f"Created cost center '{name}'")
    else:
        click.echo(f"Created cost center '{created.name}' (ID: {created.id})")


@cost_center_group.command("update")
@click.argument("center_id", type=int)
@click.option("--code", help="New code")
@click.option("--name", help="New name")
@click.option("--meta", multiple=True, help="Replace metadata with KEY=VALUE entries (repeatable)")
@click.pass_context
def update_cost_center(ctx, center_id: int, code: str | None, name: str | None, meta: tuple[str, ...]) -> None:
    """Update a cost center.

    Metadata is sent only when --meta is given, since the list never
    returns it.
    """
    centers = repository(ctx, CostCenterRepository)
    try:
        centers.list()
        current = centers.find(center_id)
        if current is None:
            raise NotFoundError(entity_not_found("Cost center", center_id))
        draft = CostCenterDraft(
            id=current.id,
            code=code if code is not None else current.code,
            name=name if name is not None else current.name,
            register_status=current.register_status,
            metadata=parse_meta(meta) if meta else current.metadata,
            metadata_touched=bool(meta),
        )
        centers.update(draft)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated cost center {center_id}")


@cost_center_group.command("deactivate")
@click.argument("center_id", type=int)
@click.pass_context
def deactivate_cost_center(ctx, center_id: int) -> None:
    """Deactivate a cost center (soft delete)."""
    centers = repository(ctx, CostCenterRepository)
    try:
        centers.deactivate(center_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Deactivated cost center {center_id}")


def register_commands(cli):
    """Register cost center commands with main CLI."""
    cli.add_command(cost_center_group, name="cost-center")
