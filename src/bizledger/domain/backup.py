"""Backup and restore of all domain state through a single backup slot."""

import dataclasses
import json
import logging
from datetime import datetime, UTC
from typing import Optional

from bizledger.domain.entities import (
    AppSettings,
    BackupData,
    BackupFrequency,
    BackupInfo,
    BackupPayload,
)
from bizledger.domain.errors import ImportFormatError, StorageWriteError
from bizledger.domain.migrations import CURRENT_APP_VERSION
from bizledger.domain.repository import StorageRepository
from bizledger.storage.mappers import backup_from_record, backup_to_record
from bizledger.utils.json_utils import format_json, load_json

logger = logging.getLogger(__name__)

# Minimum whole days between automatic backups
AUTO_BACKUP_INTERVAL_DAYS = {
    BackupFrequency.DAILY: 1,
    BackupFrequency.WEEKLY: 7,
    BackupFrequency.MONTHLY: 30,
}


def is_auto_backup_due(settings: AppSettings, now: datetime) -> bool:
    """Return True when the auto-backup policy asks for a backup at ``now``."""
    if not settings.auto_backup:
        return False
    if settings.last_backup_date is None:
        return True
    days_since_backup = (now - settings.last_backup_date).days
    return days_since_backup >= AUTO_BACKUP_INTERVAL_DAYS[settings.backup_frequency]


class BackupService:
    """Creates, restores, exports and imports full-state backups.

    Only one backup slot exists; each new backup replaces the previous one.
    """

    def __init__(self, repository: StorageRepository):
        """Initialize backup service.

        Args:
            repository: Domain repository instance
        """
        self.repository = repository

    def create_backup(self, now: Optional[datetime] = None) -> BackupData:
        """Snapshot every domain entity into the backup slot.

        Args:
            now: Backup timestamp, defaults to the current UTC time

        Returns:
            The stored backup

        Raises:
            StorageWriteError: If the backup cannot be written
        """
        if now is None:
            now = datetime.now(UTC)

        backup = BackupData(
            version=CURRENT_APP_VERSION,
            timestamp=now,
            data=BackupPayload(
                transactions=tuple(self.repository.get_transactions() or ()),
                businesses=tuple(self.repository.get_businesses() or ()),
                settings=self.repository.get_settings() or AppSettings(),
                current_business_id=self.repository.get_current_business() or "",
            ),
        )
        self.repository.save_backup(backup)
        logger.info("Backup created at %s", now.isoformat())
        return backup

    def get_last_backup(self) -> Optional[BackupData]:
        """Return the backup in the slot, or None."""
        return self.repository.get_last_backup()

    def restore_from_backup(self, backup: BackupData) -> None:
        """Overwrite live entities with the non-empty fields of backup.

        Fields that are absent or empty in the backup leave the live entity
        untouched, so a partial backup never wipes existing data.

        Raises:
            StorageWriteError: If a write fails
        """
        payload = backup.data
        if payload.transactions:
            self.repository.save_transactions(list(payload.transactions))
        if payload.businesses:
            self.repository.save_businesses(list(payload.businesses))
        if payload.settings is not None:
            self.repository.save_settings(payload.settings)
        if payload.current_business_id:
            self.repository.save_current_business(payload.current_business_id)

    def export_backup_as_json(self, now: Optional[datetime] = None) -> str:
        """Create a fresh backup and return it as pretty-printed JSON text."""
        backup = self.create_backup(now=now)
        return format_json(backup_to_record(backup))

    def parse_backup_json(self, text: str) -> BackupData:
        """Parse backup JSON text.

        Raises:
            ImportFormatError: If the text is not a usable backup record
        """
        try:
            record = load_json(text)
        except (json.JSONDecodeError, TypeError) as e:
            raise ImportFormatError(f"Backup is not valid JSON: {e}") from e
        try:
            return backup_from_record(record)
        except ValueError as e:
            raise ImportFormatError(str(e)) from e

    def import_backup_from_json(self, text: str) -> bool:
        """Restore from backup JSON text.

        Returns:
            True if the backup was restored, False if the text was rejected
            or the restore could not be written
        """
        try:
            backup = self.parse_backup_json(text)
            self.restore_from_backup(backup)
        except (ImportFormatError, StorageWriteError) as e:
            logger.error("Error importing backup: %s", e)
            return False
        return True

    def run_auto_backup_if_due(self, now: Optional[datetime] = None) -> bool:
        """Create a backup when the auto-backup policy says one is due.

        Storage failures are logged rather than raised.

        Returns:
            True if a backup was created
        """
        if now is None:
            now = datetime.now(UTC)

        settings = self.repository.get_settings()
        if settings is None or not is_auto_backup_due(settings, now):
            return False

        try:
            self.create_backup(now=now)
            self.repository.save_settings(
                dataclasses.replace(settings, last_backup_date=now)
            )
        except StorageWriteError as e:
            logger.error("Auto backup error: %s", e)
            return False
        logger.info("Auto backup completed")
        return True

    def backup_info(self) -> BackupInfo:
        """Describe the backup slot: whether it is filled, when, and its size."""
        backup = self.repository.get_last_backup()
        if backup is None:
            return BackupInfo(exists=False)
        return BackupInfo(
            exists=True,
            timestamp=backup.timestamp,
            size_bytes=self.repository.get_backup_size(),
        )
