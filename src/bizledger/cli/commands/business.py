"""Business management commands."""

import click

from bizledger.cli.error_handling import handle_error
from bizledger.domain.errors import DomainError, StorageError


@click.group()
def business_group():
    """Manage businesses."""
    pass


@business_group.command("list")
@click.pass_context
def list_businesses(ctx) -> None:
    """List all businesses. The current one is marked with *."""
    ledger = ctx.obj["ledger"]

    click.echo(f"\n{'':<2} {'ID':<18} {'Name':<30} {'Owner':<20}")
    click.echo("-" * 72)
    for business in ledger.businesses:
        marker = "*" if business.id == ledger.current_business_id else ""
        click.echo(f"{marker:<2} {business.id:<18} {business.name:<30} {business.owner_name:<20}")


@business_group.command("create")
@click.argument("name")
@click.option("--owner", "owner_name", default="", help="Owner name")
@click.option("--phone", default="", help="Phone number")
@click.option("--email", default="", help="Email address")
@click.option("--address", default="", help="Address")
@click.option("--switch", "switch_to", is_flag=True, help="Make the new business current")
@click.pass_context
def create_business(
    ctx, name: str, owner_name: str, phone: str, email: str, address: str, switch_to: bool
) -> None:
    """Create a business.

    Examples:
        bizledger business create "Corner Shop" --owner "Rahim" --switch
    """
    ledger = ctx.obj["ledger"]
    try:
        business = ledger.add_business(
            name, owner_name=owner_name, phone=phone, email=email, address=address
        )
        if switch_to:
            ledger.set_current_business(business.id)
    except (DomainError, StorageError) as e:
        handle_error(ctx, e)

    click.echo(f"Created business '{business.name}' (ID: {business.id})")
    if switch_to:
        click.echo(f"Switched to '{business.name}'")


@business_group.command("update")
@click.argument("business_id")
@click.option("--name", help="Business name")
@click.option("--owner", "owner_name", help="Owner name")
@click.option("--phone", help="Phone number")
@click.option("--email", help="Email address")
@click.option("--address", help="Address")
@click.pass_context
def update_business(ctx, business_id: str, **fields) -> None:
    """Update a business. Only the given fields change."""
    ledger = ctx.obj["ledger"]
    changes = {name: value for name, value in fields.items() if value is not None}
    if not changes:
        click.echo("Nothing to update.")
        return

    try:
        business = ledger.update_business(business_id, **changes)
    except (DomainError, StorageError) as e:
        handle_error(ctx, e)
    click.echo(f"Updated business '{business.name}'")


@business_group.command("delete")
@click.argument("business_id")
@click.pass_context
def delete_business(ctx, business_id: str) -> None:
    """Delete a business.

    Its transactions are kept but no longer appear in any report. The last
    remaining business can't be deleted.
    """
    ledger = ctx.obj["ledger"]

    business = ledger.get_business(business_id)
    if business is None:
        click.echo(f"Error: Business '{business_id}' not found", err=True)
        ctx.exit(1)

    if not click.confirm(f"Are you sure you want to delete business '{business.name}' (ID: {business_id})?"):
        click.echo("Deletion cancelled.")
        return

    try:
        ledger.delete_business(business_id)
    except (DomainError, StorageError) as e:
        handle_error(ctx, e)
    click.echo(f"Deleted business '{business.name}'")
    click.echo(f"Current business: {ledger.current_business.name}")


@business_group.command("switch")
@click.argument("business_id")
@click.pass_context
def switch_business(ctx, business_id: str) -> None:
    """Make another business current."""
    ledger = ctx.obj["ledger"]
    try:
        business = ledger.set_current_business(business_id)
    except (DomainError, StorageError) as e:
        handle_error(ctx, e)
    click.echo(f"Switched to '{business.name}'")


def register_commands(cli: click.Group) -> None:
    """Register business commands with main CLI."""
    cli.add_command(business_group, name="business")
