"""Stored-data migrations keyed by application version.

The stored ``app_version`` decides what runs:

- no stored version: the current version is written and nothing runs
- stored == current: nothing runs
- stored behind current: every migration whose target version is newer than
  the stored one runs, oldest first, one after another; the current version
  is written only after all of them succeed

A failing step aborts the run with the stored version unchanged, so the same
steps run again on the next launch. Every migration must therefore be safe to
apply twice.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from bizledger.domain.errors import MigrationError
from bizledger.domain.repository import StorageRepository

logger = logging.getLogger(__name__)

CURRENT_APP_VERSION = "1.1.0"


def parse_version(version: str) -> tuple[int, ...]:
    """Split a dotted version string into integer parts.

    Raises:
        ValueError: If any part is not a non-negative integer
    """
    if not isinstance(version, str) or not version.strip():
        raise ValueError(f"Invalid version string: {version!r}")
    parts = version.strip().split(".")
    if not all(part.isascii() and part.isdigit() for part in parts):
        raise ValueError(f"Invalid version string: {version!r}")
    return tuple(int(part) for part in parts)


def compare_versions(v1: str, v2: str) -> int:
    """Compare two dotted versions, missing trailing parts counting as 0.

    Returns:
        -1 if v1 < v2, 0 if equal, 1 if v1 > v2

    Raises:
        ValueError: If either version is malformed
    """
    parts1 = parse_version(v1)
    parts2 = parse_version(v2)
    for i in range(max(len(parts1), len(parts2))):
        p1 = parts1[i] if i < len(parts1) else 0
        p2 = parts2[i] if i < len(parts2) else 0
        if p1 < p2:
            return -1
        if p1 > p2:
            return 1
    return 0


@dataclass(frozen=True)
class Migration:
    """One-way transform of stored state introduced in ``target_version``."""

    target_version: str
    apply: Callable[[StorageRepository], None]
    description: str = ""


def _add_attachment_lists(repository: StorageRepository) -> None:
    records = repository.get_transaction_records()
    if not records:
        return
    updated = []
    for record in records:
        if isinstance(record, dict):
            record = {**record, "attachments": record.get("attachments") or []}
        updated.append(record)
    repository.save_transaction_records(updated)


def _merge_settings_defaults(repository: StorageRepository) -> None:
    settings = repository.get_settings()
    if settings is not None:
        repository.save_settings(settings)


DEFAULT_MIGRATIONS: tuple[Migration, ...] = (
    Migration("1.0.1", _add_attachment_lists, "Give every transaction an attachments list"),
    Migration("1.1.0", _merge_settings_defaults, "Fill missing settings fields with defaults"),
)


class MigrationRunner:
    """Brings stored data up to the running application version."""

    def __init__(
        self,
        repository: StorageRepository,
        migrations: Sequence[Migration] = DEFAULT_MIGRATIONS,
        current_version: str = CURRENT_APP_VERSION,
    ):
        """Initialize migration runner.

        Args:
            repository: Domain repository the migrations read and write
            migrations: Migrations to consider, in any order
            current_version: Version of the running application

        Raises:
            ValueError: If any migration or the current version is malformed
        """
        parse_version(current_version)
        self.repository = repository
        self.current_version = current_version
        self.migrations = sorted(migrations, key=lambda m: parse_version(m.target_version))

    def pending_migrations(self, stored_version: str) -> list[Migration]:
        """Return migrations newer than stored_version, oldest first."""
        return [
            m for m in self.migrations if compare_versions(stored_version, m.target_version) < 0
        ]

    def run(self) -> list[str]:
        """Run pending migrations.

        Returns:
            Target versions of the migrations that were applied, in order

        Raises:
            MigrationError: If a migration step fails
        """
        stored_version = self.repository.get_stored_app_version()

        if stored_version is None:
            self.repository.set_app_version(self.current_version)
            return []

        try:
            parse_version(stored_version)
        except ValueError:
            logger.warning(
                "Stored version %r is malformed; resetting to %s without migrating",
                stored_version,
                self.current_version,
            )
            self.repository.set_app_version(self.current_version)
            return []

        if compare_versions(stored_version, self.current_version) == 0:
            return []

        applied: list[str] = []
        for migration in self.pending_migrations(stored_version):
            logger.info("Running migration to version %s", migration.target_version)
            try:
                migration.apply(self.repository)
            except Exception as e:
                raise MigrationError(
                    f"Migration to {migration.target_version} failed: {e}"
                ) from e
            applied.append(migration.target_version)

        self.repository.set_app_version(self.current_version)
        return applied


def run_migrations(
    repository: StorageRepository, migrations: Optional[Sequence[Migration]] = None
) -> list[str]:
    """Run the default (or given) migrations against repository."""
    runner = MigrationRunner(repository, migrations if migrations is not None else DEFAULT_MIGRATIONS)
    return runner.run()
