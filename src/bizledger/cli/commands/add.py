"""Add transaction command."""

import click

from bizledger.cli.error_handling import handle_error
from bizledger.cli.formatting import format_signed
from bizledger.domain.errors import DomainError, StorageError
from bizledger.utils.amount_parser import parse_amount
from bizledger.utils.date_parser import parse_date


@click.command("add")
@click.option("--type", "txn_type", type=click.Choice(["income", "expense"]), required=True, help="Transaction type")
@click.option("--amount", required=True, help="Transaction amount (e.g., 1500 or 1,500.50)")
@click.option("--category", required=True, help="Category name (e.g., sales, rent)")
@click.option("--description", default="", help="Transaction description")
@click.option("--date", help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday'); defaults to today")
@click.option("--time", "txn_time", help="Transaction time (HH:MM); defaults to now")
@click.option("--status", type=click.Choice(["completed", "pending"]), default="completed", show_default=True)
@click.option("--notes", help="Notes")
@click.option("--business", "business_id", help="Business ID (defaults to the current business)")
@click.pass_context
def add_transaction(
    ctx,
    txn_type: str,
    amount: str,
    category: str,
    description: str,
    date: str | None,
    txn_time: str | None,
    status: str,
    notes: str | None,
    business_id: str | None,
):
    """Add a transaction.

    Examples:
        bizledger add --type income --amount 2500 --category sales --description "Shop sales"
        bizledger add --type expense --amount 800 --category rent --date 2024-01-15 --status pending
    """
    ledger = ctx.obj["ledger"]
    symbol = ctx.obj["settings"].settings.currency_symbol

    txn_date = None
    if date is not None:
        try:
            txn_date = parse_date(date)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)

    try:
        txn_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        txn = ledger.add_transaction(
            type=txn_type,
            amount=txn_amount,
            category=category,
            description=description,
            date=txn_date,
            time=txn_time,
            status=status,
            notes=notes,
            business_id=business_id,
        )
    except (DomainError, StorageError) as e:
        handle_error(ctx, e)

    click.echo(f"Added transaction {txn.id}: {format_signed(txn, symbol)} {txn.category} on {txn.date}")


def register_commands(cli: click.Group) -> None:
    """Register add command with main CLI."""
    cli.add_command(add_transaction)
