"""Dashboard command."""

import click

from bizledger.cli.formatting import format_amount


@click.command("dashboard")
@click.pass_context
def dashboard(ctx) -> None:
    """Show today's, this month's and this year's numbers for the current business."""
    ledger = ctx.obj["ledger"]
    symbol = ctx.obj["settings"].settings.currency_symbol
    metrics = ledger.get_dashboard()

    click.echo(f"\n{ledger.current_business.name}")
    click.echo("=" * 50)
    click.echo(f"{'Total balance':<20} {format_amount(metrics.total_balance, symbol):>20}")
    click.echo(f"{'Pending':<20} {metrics.pending_count:>20}")
    click.echo("-" * 50)
    click.echo(f"{'':<14} {'Income':>17} {'Expense':>17}")
    rows = [
        ("Today", metrics.today_income, metrics.today_expense),
        ("This month", metrics.monthly_income, metrics.monthly_expense),
        ("This year", metrics.yearly_income, metrics.yearly_expense),
    ]
    for label, income, expense in rows:
        click.echo(
            f"{label:<14} {format_amount(income, symbol):>17} {format_amount(expense, symbol):>17}"
        )


def register_commands(cli: click.Group) -> None:
    """Register dashboard command with main CLI."""
    cli.add_command(dashboard)
