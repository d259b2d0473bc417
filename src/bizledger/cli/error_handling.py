"""CLI error handling helpers."""

import click

from bizledger.domain.errors import DomainError, StorageError


def handle_error(ctx: click.Context, error: DomainError | StorageError | ValueError) -> None:
    """Render a domain or storage error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
