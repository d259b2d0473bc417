"""Report and trend commands."""

import click

from bizledger.cli.date_filters import resolve_cli_date_range
from bizledger.cli.formatting import format_amount
from bizledger.utils.date_parser import get_date_range


def _print_categories(title: str, totals, symbol: str) -> None:
    click.echo(f"\n{title}")
    if not totals:
        click.echo("  (none)")
        return
    for item in totals:
        click.echo(f"  {item.category:<30} {format_amount(item.total, symbol):>18}")


@click.command("report")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month', 'this year')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today', 'this month')")
@click.option("--today", is_flag=True, help="Report on today")
@click.option("--this-week", is_flag=True, help="Report on the current week")
@click.option("--this-month", is_flag=True, help="Report on the current month (default)")
@click.option("--this-year", is_flag=True, help="Report on the current year")
@click.option("--last-week", is_flag=True, help="Report on the previous week")
@click.option("--last-month", is_flag=True, help="Report on the previous month")
@click.option("--last-year", is_flag=True, help="Report on the previous year")
@click.pass_context
def report(
    ctx,
    start_date: str | None,
    end_date: str | None,
    today: bool,
    this_week: bool,
    this_month: bool,
    this_year: bool,
    last_week: bool,
    last_month: bool,
    last_year: bool,
):
    """Show income, expense and category breakdowns for a period.

    Only completed transactions count towards the totals.
    """
    ledger = ctx.obj["ledger"]
    symbol = ctx.obj["settings"].settings.currency_symbol

    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={
            "today": today,
            "this-week": this_week,
            "this-month": this_month,
            "this-year": this_year,
            "last-week": last_week,
            "last-month": last_month,
            "last-year": last_year,
        },
        default_range=get_date_range("this-month"),
    )
    if start is None or end is None:
        click.echo("Error: Both --start-date and --end-date are required for a custom range.", err=True)
        ctx.exit(1)
    if start > end:
        click.echo("Error: Start date must not be after end date.", err=True)
        ctx.exit(1)

    summary = ledger.get_period_summary(start, end)

    click.echo(f"\n{ledger.current_business.name}: {start} to {end}")
    click.echo("=" * 50)
    click.echo(f"{'Income':<30} {format_amount(summary.income, symbol):>18}")
    click.echo(f"{'Expense':<30} {format_amount(summary.expense, symbol):>18}")
    click.echo(f"{'Net':<30} {format_amount(summary.net, symbol):>18}")
    click.echo(f"{'Completed transactions':<30} {summary.completed_count:>18}")
    click.echo(f"{'Pending transactions':<30} {summary.pending_count:>18}")
    _print_categories("Income by category", summary.income_by_category, symbol)
    _print_categories("Expense by category", summary.expense_by_category, symbol)


@click.command("trends")
@click.pass_context
def trends(ctx) -> None:
    """Show completed income and expense for the last six months."""
    ledger = ctx.obj["ledger"]
    symbol = ctx.obj["settings"].settings.currency_symbol

    click.echo(f"\n{'Month':<10} {'Income':>18} {'Expense':>18}")
    click.echo("-" * 48)
    for point in ledger.get_monthly_trends():
        label = f"{point.month} {point.period[:4]}"
        click.echo(
            f"{label:<10} {format_amount(point.income, symbol):>18} {format_amount(point.expense, symbol):>18}"
        )


def register_commands(cli: click.Group) -> None:
    """Register report commands with main CLI."""
    cli.add_command(report)
    cli.add_command(trends)
