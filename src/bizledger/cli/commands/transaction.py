"""Transaction management commands."""

import click

from bizledger.cli.date_filters import resolve_cli_date_range
from bizledger.cli.error_handling import handle_error
from bizledger.cli.formatting import format_amount, format_signed
from bizledger.domain.entities import TransactionFilters, TransactionStatus, TransactionType
from bizledger.domain.errors import DomainError, StorageError
from bizledger.utils.amount_parser import parse_amount
from bizledger.utils.date_parser import parse_date


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("list")
@click.option("--type", "txn_type", type=click.Choice(["all", "income", "expense"]), default="all")
@click.option("--category", help="Only this category")
@click.option("--status", type=click.Choice(["all", "completed", "pending"]), default="all")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month', 'this year')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today', 'this month')")
@click.option("--search", help="Text to find in description or category")
@click.option("--limit", type=int, help="Show at most this many transactions")
@click.pass_context
def list_transactions(
    ctx,
    txn_type: str,
    category: str | None,
    status: str,
    start_date: str | None,
    end_date: str | None,
    search: str | None,
    limit: int | None,
):
    """List transactions of the current business, newest first."""
    ledger = ctx.obj["ledger"]
    symbol = ctx.obj["settings"].settings.currency_symbol

    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags={}
    )
    filters = TransactionFilters(
        type=txn_type,
        category=category,
        status=status,
        date_from=start,
        date_to=end,
        search=search,
    )
    transactions = ledger.get_filtered_transactions(filters)
    if limit is not None:
        transactions = transactions[:limit]

    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 100)
    click.echo(
        f"{'ID':<22} {'Date':<11} {'Time':<6} {'Amount':>16} {'Status':<10} {'Category':<14} {'Description':<20}"
    )
    click.echo("-" * 100)
    for txn in transactions:
        click.echo(
            f"{txn.id:<22} {str(txn.date):<11} {txn.time:<6} {format_signed(txn, symbol):>16} "
            f"{txn.status.value:<10} {txn.category[:14]:<14} {txn.description[:20]:<20}"
        )

    income = sum(t.amount for t in transactions if t.type == TransactionType.INCOME)
    expense = sum(t.amount for t in transactions if t.type == TransactionType.EXPENSE)
    click.echo("-" * 100)
    click.echo(
        f"Income: {format_amount(income, symbol)} | Expense: {format_amount(expense, symbol)} | "
        f"Count: {len(transactions)}"
    )


@transaction_group.command("show")
@click.argument("transaction_id")
@click.pass_context
def show_transaction(ctx, transaction_id: str) -> None:
    """Show one transaction in full."""
    ledger = ctx.obj["ledger"]
    symbol = ctx.obj["settings"].settings.currency_symbol

    txn = ledger.get_transaction(transaction_id)
    if txn is None:
        click.echo(f"Error: Transaction '{transaction_id}' not found", err=True)
        ctx.exit(1)

    business = ledger.get_business(txn.business_id)
    click.echo(f"Transaction ID: {txn.id}")
    click.echo(f"  Type: {txn.type.value}")
    click.echo(f"  Amount: {format_amount(txn.amount, symbol)}")
    click.echo(f"  Category: {txn.category}")
    click.echo(f"  Description: {txn.description}")
    click.echo(f"  Date: {txn.date} {txn.time}")
    click.echo(f"  Status: {txn.status.value}")
    click.echo(f"  Business: {business.name if business else 'Deleted business'} ({txn.business_id})")
    if txn.notes:
        click.echo(f"  Notes: {txn.notes}")
    if txn.attachments:
        click.echo(f"  Attachments: {', '.join(txn.attachments)}")
    if txn.created_at:
        click.echo(f"  Created: {txn.created_at.isoformat()}")
    if txn.updated_at:
        click.echo(f"  Updated: {txn.updated_at.isoformat()}")


@transaction_group.command("update")
@click.argument("transaction_id")
@click.option("--type", "txn_type", type=click.Choice([t.value for t in TransactionType]))
@click.option("--amount", help="Transaction amount")
@click.option("--category", help="Category name")
@click.option("--description", help="Transaction description")
@click.option("--date", help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')")
@click.option("--time", "txn_time", help="Transaction time (HH:MM)")
@click.option("--status", type=click.Choice([s.value for s in TransactionStatus]))
@click.option("--notes", help="Notes")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: str,
    txn_type: str | None,
    amount: str | None,
    category: str | None,
    description: str | None,
    date: str | None,
    txn_time: str | None,
    status: str | None,
    notes: str | None,
) -> None:
    """Update a transaction.

    Updates only the fields that are provided.

    Examples:
        bizledger transaction update txn_1a2b3c --status completed
        bizledger transaction update txn_1a2b3c --amount 950 --category rent
    """
    ledger = ctx.obj["ledger"]
    changes = {}

    if txn_type is not None:
        changes["type"] = txn_type
    if amount is not None:
        try:
            changes["amount"] = parse_amount(amount)
        except ValueError as e:
            click.echo(f"Error: Invalid amount format: {e}", err=True)
            ctx.exit(1)
    if category is not None:
        changes["category"] = category
    if description is not None:
        changes["description"] = description
    if date is not None:
        try:
            changes["date"] = parse_date(date)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)
    if txn_time is not None:
        changes["time"] = txn_time
    if status is not None:
        changes["status"] = status
    if notes is not None:
        changes["notes"] = notes or None

    if not changes:
        click.echo("Nothing to update.")
        return

    try:
        ledger.update_transaction(transaction_id, **changes)
    except (DomainError, StorageError) as e:
        handle_error(ctx, e)
    click.echo(f"Updated transaction {transaction_id}")


@transaction_group.command("delete")
@click.argument("transaction_id")
@click.pass_context
def delete_transaction(ctx, transaction_id: str) -> None:
    """Delete a transaction.

    Examples:
        bizledger transaction delete txn_1a2b3c
    """
    ledger = ctx.obj["ledger"]

    if ledger.get_transaction(transaction_id) is None:
        click.echo(f"Error: Transaction '{transaction_id}' not found", err=True)
        ctx.exit(1)

    if not click.confirm(f"Are you sure you want to delete transaction {transaction_id}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        ledger.delete_transaction(transaction_id)
    except (DomainError, StorageError) as e:
        handle_error(ctx, e)
    click.echo(f"Deleted transaction {transaction_id}")


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
