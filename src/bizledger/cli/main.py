"""Main CLI entry point."""

import logging

import click

from bizledger.cli.error_handling import handle_error
from bizledger.domain.backup import BackupService
from bizledger.domain.errors import DomainError, StorageError
from bizledger.domain.ledger import LedgerService
from bizledger.domain.repository import StorageRepository
from bizledger.domain.settings import SettingsService
from bizledger.storage import create_sqlite_store

# Import and register all commands at module level
from bizledger.cli.commands import (
    add,
    backup,
    business,
    dashboard,
    init,
    report,
    settings,
    storage,
    transaction,
)

# Groups that manage backups themselves and must not trigger an automatic one
SKIP_AUTO_BACKUP = {"backup"}


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides BIZLEDGER_DB_PATH environment variable)",
    envvar="BIZLEDGER_DB_PATH",
)
@click.option(
    "--namespace",
    help="Key namespace inside the database (overrides BIZLEDGER_NAMESPACE environment variable)",
    envvar="BIZLEDGER_NAMESPACE",
)
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, db_path: str | None, namespace: str | None, debug: bool):
    """Bizledger - Income and expense tracking for small businesses.

    Record transactions for one or more businesses, see dashboards and
    reports, and keep a local backup of everything.
    """
    ctx.ensure_object(dict)

    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("bizledger").setLevel(logging.DEBUG)

    # Open storage only when actually running a command (not when showing help)
    if ctx.invoked_subcommand is None:
        return

    store = create_sqlite_store(database_path=db_path, namespace=namespace)
    store.connect()
    store.initialize_schema()
    ctx.call_on_close(store.disconnect)

    repository = StorageRepository(store)
    ledger = LedgerService(repository)
    settings_service = SettingsService(repository)

    try:
        ledger.load()
        settings_service.load()
        if ctx.invoked_subcommand not in SKIP_AUTO_BACKUP:
            if BackupService(repository).run_auto_backup_if_due():
                settings_service.load()
    except (DomainError, StorageError) as e:
        handle_error(ctx, e)

    ctx.obj["store"] = store
    ctx.obj["repository"] = repository
    ctx.obj["ledger"] = ledger
    ctx.obj["settings"] = settings_service


# Register all commands
init.register_commands(cli)
dashboard.register_commands(cli)
add.register_commands(cli)
transaction.register_commands(cli)
business.register_commands(cli)
report.register_commands(cli)
backup.register_commands(cli)
settings.register_commands(cli)
storage.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
