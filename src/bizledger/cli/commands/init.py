"""Initialize command."""

import click

from bizledger.cli.error_handling import handle_error
from bizledger.domain.errors import DomainError, StorageError


@click.command("init")
@click.option("--sample-data", is_flag=True, help="Generate demo transactions if the ledger is empty")
@click.pass_context
def init(ctx, sample_data: bool) -> None:
    """Set up the ledger and finish onboarding.

    Creates the default business on an empty store. Running it again is safe.

    Examples:
        bizledger init
        bizledger init --sample-data
    """
    ledger = ctx.obj["ledger"]
    settings_service = ctx.obj["settings"]

    try:
        ledger.load(seed_sample_data=sample_data)
        settings_service.complete_onboarding()
    except (DomainError, StorageError) as e:
        handle_error(ctx, e)

    click.echo(
        f"Ledger ready: {len(ledger.businesses)} business(es), "
        f"{len(ledger.transactions)} transaction(s)"
    )
    click.echo(f"Current business: {ledger.current_business.name} ({ledger.current_business_id})")


def register_commands(cli: click.Group) -> None:
    """Register init command with main CLI."""
    cli.add_command(init)
