"""Backup commands."""

from pathlib import Path

import click

from bizledger.cli.error_handling import handle_error
from bizledger.domain.errors import DomainError, StorageError


def _report(ctx, result) -> None:
    if not result.success:
        click.echo(f"Error: {result.message}", err=True)
        ctx.exit(1)
    click.echo(result.message)


@click.group()
def backup_group():
    """Create, restore, export and import backups.

    A single backup slot is kept; every new backup replaces the previous one.
    """
    pass


@backup_group.command("create")
@click.pass_context
def create_backup(ctx) -> None:
    """Snapshot all data into the backup slot."""
    _report(ctx, ctx.obj["settings"].create_backup())


@backup_group.command("restore")
@click.pass_context
def restore_backup(ctx) -> None:
    """Replace current data with the contents of the backup slot."""
    if not click.confirm("Restoring overwrites current data. Continue?"):
        click.echo("Restore cancelled.")
        return
    _report(ctx, ctx.obj["settings"].restore_backup())
    ctx.obj["ledger"].refresh()


@backup_group.command("info")
@click.pass_context
def backup_info(ctx) -> None:
    """Show when the last backup was made and how large it is."""
    info = ctx.obj["settings"].backup_info()
    if not info.exists:
        click.echo("No backup found.")
        return
    click.echo(f"Last backup: {info.timestamp.isoformat()}")
    click.echo(f"Size: {info.size_kb:.2f} KB")


@backup_group.command("export")
@click.argument("output", type=click.Path(dir_okay=False, writable=True, path_type=Path), required=False)
@click.pass_context
def export_backup(ctx, output: Path | None) -> None:
    """Write a fresh backup as JSON to OUTPUT (stdout by default).

    Examples:
        bizledger backup export ledger-backup.json
    """
    try:
        text = ctx.obj["settings"].export_data()
    except (DomainError, StorageError) as e:
        handle_error(ctx, e)
    if output is None:
        click.echo(text)
        return
    output.write_text(text + "\n", encoding="utf-8")
    click.echo(f"Exported backup to {output}")


@backup_group.command("import")
@click.argument("source", type=click.File("r", encoding="utf-8"))
@click.pass_context
def import_backup(ctx, source) -> None:
    """Restore data from a JSON backup file.

    Parts missing from the file are left as they are.
    """
    _report(ctx, ctx.obj["settings"].import_data(source.read()))
    ctx.obj["ledger"].refresh()


def register_commands(cli: click.Group) -> None:
    """Register backup commands with main CLI."""
    cli.add_command(backup_group, name="backup")
