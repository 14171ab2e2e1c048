"""Account management commands."""

import click

from ledgerdesk.cli.context import parse_meta, repository, status_marker
from ledgerdesk.cli.error_handling import handle_domain_error
from ledgerdesk.domain.account import AccountRepository
from ledgerdesk.domain.entities import AccountDraft
from ledgerdesk.domain.errors import DomainError
from ledgerdesk.utils.account_resolver import resolve_account


@click.group()
def account_group():
    """Manage the chart of accounts."""
    pass


@account_group.command("list")
@click.option("--only-active", is_flag=True, help="Hide inactive accounts")
@click.option("--offset", type=int, default=0, show_default=True, help="Row offset")
@click.option("--limit", type=int, default=None, help="Page size (default 200)")
@click.pass_context
def list_accounts(ctx, only_active: bool, offset: int, limit: int | None):
    """List accounts."""
    accounts = repository(ctx, AccountRepository)
    try:
        rows = accounts.list(offset=offset, limit=limit, filters={"only_active": only_active or None})
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not rows:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 80)
    for acc in rows:
        group = f" | Group: {acc.group_name}" if acc.group_name else ""
        click.echo(
            f"ID: {str(acc.id):>4} | {acc.code:12s} | {acc.name:30s} | {acc.account_type or '-'}"
            f"{group}{status_marker(acc.register_status)}"
        )


@account_group.command("create")
@click.argument("code")
@click.argument("name")
@click.option("--group", "group_id", help="Account group ID")
@click.option("--type", "account_type", default="", help="Account type (e.g. ACTIVO, PASIVO)")
@click.option("--sub-type", default="", help="Account sub-type")
@click.option("--category", default="", help="Account category")
@click.option("--currency", default="", help="Currency code (e.g. BOB)")
@click.option("--meta", multiple=True, help="Metadata entry KEY=VALUE (repeatable)")
@click.pass_context
def create_account(
    ctx,
    code: str,
    name: str,
    group_id: str | None,
    account_type: str,
    sub_type: str,
    category: str,
    currency: str,
    meta: tuple[str, ...],
):
    """Create a new account.

    Examples:
        ledgerdesk account create 1.1.01 "Caja general" --group 3 --type ACTIVO
        ledgerdesk account create 4.1.01 "Ventas" --currency BOB --meta origen=manual
    """
    accounts = repository(ctx, AccountRepository)
    draft = AccountDraft(
        code=code,
        name=name,
        group_id=group_id,
        account_type=account_type,
        sub_type=sub_type,
        category=category,
        currency=currency,
        metadata=parse_meta(meta) or None,
    )
    try:
        created = accounts.create(draft)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if created is None:
        click.echo(f"Created account '{name}'")
    else:
        click.echo(f"Created account '{created.name}' (ID: {created.id})")


@account_group.command("update")
@click.argument("account", metavar="ACCOUNT")
@click.option("--code", help="New code")
@click.option("--name", help="New name")
@click.option("--group", "group_id", help="New account group ID")
@click.option("--type", "account_type", help="New account type")
@click.option("--sub-type", help="New sub-type")
@click.option("--category", help="New category")
@click.option("--currency", help="New currency")
@click.option("--meta", multiple=True, help="Replace metadata with KEY=VALUE entries (repeatable)")
@click.pass_context
def update_account(
    ctx,
    account: str,
    code: str | None,
    name: str | None,
    group_id: str | None,
    account_type: str | None,
    sub_type: str | None,
    category: str | None,
    currency: str | None,
    meta: tuple[str, ...],
) -> None:
    """Update an account.

    ACCOUNT can be an account ID or code. Only the given fields change;
    metadata is sent only when --meta is given.

    Examples:
        ledgerdesk account update 12 --name "Caja chica"
        ledgerdesk account update 1.1.01 --meta revisado=si
    """
    accounts = repository(ctx, AccountRepository)
    try:
        accounts.list()
        current = resolve_account(accounts, account)
        draft = AccountDraft(
            id=current.id,
            code=code if code is not None else current.code,
            name=name if name is not None else current.name,
            group_id=group_id if group_id is not None else current.group_id,
            account_type=account_type if account_type is not None else current.account_type,
            sub_type=sub_type if sub_type is not None else current.sub_type,
            category=category if category is not None else current.category,
            currency=currency if currency is not None else current.currency,
            register_status=current.register_status,
            metadata=parse_meta(meta) if meta else current.metadata,
            metadata_touched=bool(meta),
        )
        accounts.update(draft)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated account {current.id}")


@account_group.command("deactivate")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def deactivate_account(ctx, account: str) -> None:
    """Deactivate an account (soft delete).

    ACCOUNT can be an account ID or code.
    """
    accounts = repository(ctx, AccountRepository)
    try:
        accounts.list()
        current = resolve_account(accounts, account)
        accounts.deactivate(current)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Deactivated account '{current.name}' (ID: {current.id})")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
