"""Settings and PIN commands."""

import dataclasses

import click

from bizledger.cli.error_handling import handle_error
from bizledger.domain.errors import DomainError, StorageError, ValidationError
from bizledger.domain.settings import parse_setting_value


def _display(value) -> str:
    if value is None:
        return "-"
    if hasattr(value, "value"):
        return value.value
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


@click.group()
def settings_group():
    """View and change settings."""
    pass


@settings_group.command("show")
@click.pass_context
def show_settings(ctx) -> None:
    """Show all settings."""
    settings = ctx.obj["settings"].settings
    for name, value in dataclasses.asdict(settings).items():
        click.echo(f"{name:<20} {_display(value)}")


@settings_group.command("set")
@click.argument("name")
@click.argument("value")
@click.pass_context
def set_setting(ctx, name: str, value: str) -> None:
    """Change one setting.

    Examples:
        bizledger settings set currency_symbol $
        bizledger settings set backup_frequency daily
        bizledger settings set auto_backup false
    """
    service = ctx.obj["settings"]
    try:
        parsed = parse_setting_value(name, value)
        if name == "pin_enabled":
            raise ValidationError("pin_enabled follows the stored PIN. Use 'pin set' or 'pin clear' instead")
        if name == "biometric_enabled":
            updated = service.set_biometric_enabled(parsed)
        else:
            updated = service.update(**{name: parsed})
    except (DomainError, StorageError) as e:
        handle_error(ctx, e)
    click.echo(f"{name} = {_display(getattr(updated, name))}")


@settings_group.command("reset")
@click.pass_context
def reset_settings(ctx) -> None:
    """Restore the default settings."""
    if not click.confirm("Reset all settings to their defaults?"):
        click.echo("Reset cancelled.")
        return
    ctx.obj["settings"].reset()
    click.echo("Settings reset to defaults.")


@click.group()
def pin_group():
    """Manage the PIN lock."""
    pass


@pin_group.command("set")
@click.option("--pin", prompt=True, hide_input=True, confirmation_prompt=True, help="4-digit PIN")
@click.pass_context
def set_pin(ctx, pin: str) -> None:
    """Set or replace the PIN and enable the PIN lock."""
    try:
        ctx.obj["settings"].set_pin(pin)
    except (DomainError, StorageError) as e:
        handle_error(ctx, e)
    click.echo("PIN set.")


@pin_group.command("verify")
@click.option("--pin", prompt=True, hide_input=True, help="4-digit PIN")
@click.pass_context
def verify_pin(ctx, pin: str) -> None:
    """Check a PIN. Exits with status 1 if it doesn't match."""
    service = ctx.obj["settings"]
    if not service.has_pin():
        click.echo("Error: No PIN is set.", err=True)
        ctx.exit(1)
    if not service.verify_pin(pin):
        click.echo("Error: Incorrect PIN.", err=True)
        ctx.exit(1)
    click.echo("PIN verified.")


@pin_group.command("clear")
@click.pass_context
def clear_pin(ctx) -> None:
    """Remove the PIN and disable the PIN lock."""
    ctx.obj["settings"].clear_pin()
    click.echo("PIN removed.")


def register_commands(cli: click.Group) -> None:
    """Register settings and PIN commands with main CLI."""
    cli.add_command(settings_group, name="settings")
    cli.add_command(pin_group, name="pin")
