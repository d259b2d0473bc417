"""Storage inspection and reset commands."""

import click

from bizledger.cli.error_handling import handle_error
from bizledger.domain.errors import StorageError


@click.group()
def storage_group():
    """Inspect local storage."""
    pass


@storage_group.command("info")
@click.option("--keys", "show_keys", is_flag=True, help="List every stored key")
@click.pass_context
def storage_info(ctx, show_keys: bool) -> None:
    """Show how many keys are stored and their total size."""
    info = ctx.obj["settings"].storage_info()
    click.echo(f"Namespace: {ctx.obj['store'].namespace}")
    click.echo(f"Keys: {info.total_keys}")
    click.echo(f"Size: {info.total_size_kb:.2f} KB")
    if show_keys:
        for key in info.keys:
            click.echo(f"  {key}")


@click.command("reset")
@click.confirmation_option(prompt="This erases all transactions, businesses and settings. Continue?")
@click.pass_context
def reset(ctx) -> None:
    """Erase all data and start over with the default business."""
    ledger = ctx.obj["ledger"]
    try:
        ledger.clear_all_data()
        ctx.obj["settings"].load()
    except StorageError as e:
        handle_error(ctx, e)
    click.echo(f"All data erased. Current business: {ledger.current_business.name}")


def register_commands(cli: click.Group) -> None:
    """Register storage commands with main CLI."""
    cli.add_command(storage_group, name="storage")
    cli.add_command(reset)
