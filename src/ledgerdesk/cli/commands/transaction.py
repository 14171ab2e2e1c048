"""Transaction (ledger entry) commands."""

import click

from ledgerdesk.cli.context import format_amount, parse_meta, repository, status_marker
from ledgerdesk.cli.error_handling import handle_domain_error
from ledgerdesk.domain.account import AccountRepository
from ledgerdesk.domain.composer import ComposerState, TransactionComposer
from ledgerdesk.domain.entities import TransactionDraft
from ledgerdesk.domain.errors import DomainError, NotFoundError, entity_not_found
from ledgerdesk.domain.ledger import LedgerValidator
from ledgerdesk.domain.transaction import TransactionRepository
from ledgerdesk.utils.account_resolver import resolve_account
from ledgerdesk.utils.date_parser import PERIODS, get_date_range, parse_date
from ledgerdesk.utils.line_parser import parse_line

TRANSACTION_PAGE_SIZE = 50


@click.group()
def transaction_group():
    """Record and browse ledger entries."""
    pass


def _parse_date_or_exit(ctx, value: str, label: str):
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


@transaction_group.command("list")
@click.option("--from", "date_from", help="First day (YYYY-MM-DD or 'today', 'yesterday')")
@click.option("--to", "date_to", help="Last day (YYYY-MM-DD or 'today', 'yesterday')")
@click.option("--period", type=click.Choice(PERIODS), help="Named period instead of --from/--to")
@click.option("--type", "transaction_type", help="Transaction type (e.g. VENTA, AJUSTE)")
@click.option("--search", default="", help="Filter lines by id, description, reference or account")
@click.option("--only-active", is_flag=True, help="Hide inactive transactions")
@click.option("--offset", type=int, default=0, show_default=True, help="Row offset")
@click.option("--limit", type=int, default=TRANSACTION_PAGE_SIZE, show_default=True, help="Page size")
@click.pass_context
def list_transactions(
    ctx,
    date_from: str | None,
    date_to: str | None,
    period: str | None,
    transaction_type: str | None,
    search: str,
    only_active: bool,
    offset: int,
    limit: int,
):
    """List ledger entries with their movement lines.

    Examples:
        ledgerdesk transaction list --period this-month
        ledgerdesk transaction list --from 2026-01-01 --type VENTA --search caja
    """
    if period and (date_from or date_to):
        click.echo("Error: --period cannot be combined with --from or --to.", err=True)
        ctx.exit(1)

    if period:
        start, end = get_date_range(period)
    else:
        start = _parse_date_or_exit(ctx, date_from, "start date") if date_from else None
        end = _parse_date_or_exit(ctx, date_to, "end date") if date_to else None

    filters = {
        "date_from": start,
        "date_to": end,
        "transaction_type": transaction_type,
        "only_active": only_active or None,
    }
    transactions = repository(ctx, TransactionRepository, page_size=TRANSACTION_PAGE_SIZE)
    try:
        transactions.list(offset=offset, limit=limit, filters=filters)
    except DomainError as e:
        handle_domain_error(ctx, e)

    pairs = transactions.search_lines(search)
    if not pairs:
        click.echo("No transactions found.")
        return

    click.echo(f"\nFound {len({txn.id for txn, _ in pairs})} transaction(s):")
    click.echo("=" * 100)
    current_id = object()
    for txn, line in pairs:
        if txn.id != current_id:
            current_id = txn.id
            click.echo(
                f"#{txn.id} {txn.date or '-'} {txn.transaction_type:10s} {txn.description}"
                f"{status_marker(txn.register_status)}"
            )
            if txn.external_reference:
                click.echo(f"    Ref: {txn.external_reference}")
        account = f"{line.account_code} {line.account_name}".strip() or str(line.account_id)
        click.echo(
            f"    {account:40s} {format_amount(line.debit):>14} {format_amount(line.credit):>14}"
            f"  {line.description or ''}"
        )


@transaction_group.command("add")
@click.option("--date", "txn_date", default="today", show_default=True, help="Entry date")
@click.option("--type", "transaction_type", required=True, help="Transaction type (e.g. VENTA, AJUSTE)")
@click.option("--description", default="", help="Entry description (glosa)")
@click.option("--reference", default="", help="External reference")
@click.option(
    "--line",
    "lines",
    multiple=True,
    required=True,
    help="Movement ACCOUNT:DEBIT:CREDIT[:DESCRIPTION]; ACCOUNT is an ID or code (repeatable)",
)
@click.option("--product", "product_id", type=int, help="Catalog item ID (sales only)")
@click.option("--quantity", default="1", show_default=True, help="Quantity sold (sales only)")
@click.option("--appointment", "appointment_id", type=int, help="Appointment ID (sales only)")
@click.option("--meta", multiple=True, help="Metadata entry KEY=VALUE (repeatable)")
@click.option(
    "--allow-uniform-credits",
    is_flag=True,
    help="Accept entries whose credit lines all share one amount",
)
@click.pass_context
def add_transaction(
    ctx,
    txn_date: str,
    transaction_type: str,
    description: str,
    reference: str,
    lines: tuple[str, ...],
    product_id: int | None,
    quantity: str,
    appointment_id: int | None,
    meta: tuple[str, ...],
    allow_uniform_credits: bool,
):
    """Record a balanced ledger entry.

    Sales (--type VENTA) go through the sale procedure and need --product.

    Examples:
        ledgerdesk transaction add --type AJUSTE --line 11:150:: --line 40::150:Ajuste
        ledgerdesk transaction add --type VENTA --product 9 --quantity 2 \\
            --line 1.1.01:300:: --line 4.1.01::300
    """
    entry_date = _parse_date_or_exit(ctx, txn_date, "date")
    try:
        parsed = [parse_line(spec) for spec in lines]
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    accounts = repository(ctx, AccountRepository)
    transactions = repository(ctx, TransactionRepository, page_size=TRANSACTION_PAGE_SIZE)
    composer = TransactionComposer(
        transactions,
        accounts,
        validator=LedgerValidator(reject_uniform_credits=not allow_uniform_credits),
        draft=TransactionDraft(
            date=entry_date,
            transaction_type=transaction_type.strip().upper(),
            description=description,
            external_reference=reference,
            metadata=parse_meta(meta),
            product_id=product_id,
            quantity=quantity,
            appointment_id=appointment_id,
        ),
    )
    try:
        accounts.list()
        for account_ref, line in parsed:
            account = resolve_account(accounts, account_ref)
            composer.add_line(account.id, line.debit, line.credit, line.description)
    except DomainError as e:
        handle_domain_error(ctx, e)

    outcome = composer.submit()
    if outcome.state != ComposerState.COMMITTED:
        click.echo(f"Error: {outcome.message}", err=True)
        ctx.exit(1)

    txn = outcome.transaction
    click.echo(f"Created transaction {txn.id}")
    click.echo(f"  Date: {txn.date}")
    click.echo(f"  Type: {txn.transaction_type}")
    click.echo(f"  Total: {format_amount(txn.total_debit)}")
    if txn.description:
        click.echo(f"  Description: {txn.description}")


@transaction_group.command("update")
@click.argument("transaction_id", type=int)
@click.option("--date", "txn_date", help="New entry date")
@click.option("--type", "transaction_type", help="New transaction type")
@click.option("--description", help="New description")
@click.option("--reference", help="New external reference")
@click.option("--meta", multiple=True, help="Replace metadata with KEY=VALUE entries (repeatable)")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: int,
    txn_date: str | None,
    transaction_type: str | None,
    description: str | None,
    reference: str | None,
    meta: tuple[str, ...],
) -> None:
    """Edit a transaction header. Movement lines cannot be edited."""
    new_date = _parse_date_or_exit(ctx, txn_date, "date") if txn_date else None
    transactions = repository(ctx, TransactionRepository, page_size=TRANSACTION_PAGE_SIZE)
    try:
        transactions.list()
        current = transactions.find(transaction_id)
        if current is None:
            raise NotFoundError(entity_not_found("Transaction", transaction_id))
        draft = TransactionDraft(
            id=current.id,
            date=new_date or current.date,
            transaction_type=transaction_type if transaction_type is not None else current.transaction_type,
            description=description if description is not None else current.description,
            external_reference=reference if reference is not None else current.external_reference,
            metadata=parse_meta(meta) if meta else dict(current.metadata or {}),
            metadata_touched=bool(meta),
            register_status=current.register_status,
        )
        transactions.update(draft)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated transaction {transaction_id}")


@transaction_group.command("deactivate")
@click.argument("transaction_id", type=int)
@click.option("--reason", help="Reason recorded with the deactivation")
@click.pass_context
def deactivate_transaction(ctx, transaction_id: int, reason: str | None) -> None:
    """Deactivate (void) a transaction."""
    transactions = repository(ctx, TransactionRepository, page_size=TRANSACTION_PAGE_SIZE)
    try:
        transactions.deactivate(transaction_id, reason=reason)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Deactivated transaction {transaction_id}")


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
