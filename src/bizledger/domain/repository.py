"""Typed domain accessors over the key-value store."""

import logging
from typing import Any, Callable, Optional, TypeVar

from bizledger.domain.entities import AppSettings, BackupData, Business, StorageInfo, Transaction
from bizledger.domain.errors import StorageReadError
from bizledger.storage.base import KeyValueStore
from bizledger.storage.mappers import (
    backup_from_record,
    backup_to_record,
    business_from_record,
    business_to_record,
    settings_from_record,
    settings_to_record,
    transaction_from_record,
    transaction_to_record,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StorageKeys:
    """Fixed storage keys for every persisted entity."""

    TRANSACTIONS = "transactions"
    BUSINESSES = "businesses"
    CURRENT_BUSINESS = "current_business"
    SETTINGS = "settings"
    APP_VERSION = "app_version"
    BACKUP = "backup"
    FIRST_LAUNCH = "first_launch"
    PIN_CODE = "pin_code"
    BIOMETRIC_ENABLED = "biometric_enabled"


class StorageRepository:
    """Domain repository mapping each entity to its storage key.

    Collections are written as full overwrites; there are no partial writes.
    """

    def __init__(self, store: KeyValueStore):
        """Initialize repository.

        Args:
            store: Key-value store instance
        """
        self.store = store

    def _read_list(self, key: str, convert: Callable[[Any], T]) -> Optional[list[T]]:
        """Read a stored list, skipping records that cannot be mapped."""
        records = self.store.get_item(key)
        if records is None:
            return None
        if not isinstance(records, list):
            logger.warning("Ignoring %s: expected a list, got %s", key, type(records).__name__)
            return None

        items: list[T] = []
        for record in records:
            try:
                items.append(convert(record))
            except ValueError as e:
                logger.warning("Skipping stored %s entry: %s", key, e)
        return items

    # Transactions
    def save_transactions(self, transactions: list[Transaction]) -> None:
        self.store.set_item(StorageKeys.TRANSACTIONS, [transaction_to_record(t) for t in transactions])

    def get_transactions(self) -> Optional[list[Transaction]]:
        return self._read_list(StorageKeys.TRANSACTIONS, transaction_from_record)

    def get_transaction_records(self) -> Optional[list[Any]]:
        """Return the stored transaction records without mapping them."""
        records = self.store.get_item(StorageKeys.TRANSACTIONS)
        return records if isinstance(records, list) else None

    def save_transaction_records(self, records: list[Any]) -> None:
        self.store.set_item(StorageKeys.TRANSACTIONS, records)

    # Businesses
    def save_businesses(self, businesses: list[Business]) -> None:
        self.store.set_item(StorageKeys.BUSINESSES, [business_to_record(b) for b in businesses])

    def get_businesses(self) -> Optional[list[Business]]:
        return self._read_list(StorageKeys.BUSINESSES, business_from_record)

    def save_current_business(self, business_id: str) -> None:
        self.store.set_item(StorageKeys.CURRENT_BUSINESS, business_id)

    def get_current_business(self) -> Optional[str]:
        value = self.store.get_item(StorageKeys.CURRENT_BUSINESS)
        return value if isinstance(value, str) else None

    # Settings
    def save_settings(self, settings: AppSettings) -> None:
        self.store.set_item(StorageKeys.SETTINGS, settings_to_record(settings))

    def get_settings(self) -> Optional[AppSettings]:
        """Get stored settings merged over defaults, or None if never saved."""
        record = self.store.get_item(StorageKeys.SETTINGS)
        if record is None:
            return None
        try:
            return settings_from_record(record)
        except ValueError as e:
            logger.warning("Ignoring stored settings: %s", e)
            return None

    def get_raw_settings(self) -> Optional[dict[str, Any]]:
        """Return the stored settings record as written, without defaults."""
        record = self.store.get_item(StorageKeys.SETTINGS)
        return record if isinstance(record, dict) else None

    # Security
    def save_pin_code(self, pin: str) -> None:
        self.store.set_item(StorageKeys.PIN_CODE, pin)

    def get_pin_code(self) -> Optional[str]:
        value = self.store.get_item(StorageKeys.PIN_CODE)
        return value if isinstance(value, str) else None

    def remove_pin_code(self) -> None:
        self.store.remove_item(StorageKeys.PIN_CODE)

    def set_biometric_enabled(self, enabled: bool) -> None:
        self.store.set_item(StorageKeys.BIOMETRIC_ENABLED, enabled)

    def get_biometric_enabled(self) -> bool:
        return self.store.get_item(StorageKeys.BIOMETRIC_ENABLED) is True

    # First launch
    def is_first_launch(self) -> bool:
        """Return True iff the first-launch marker has never been written."""
        return self.store.get_item(StorageKeys.FIRST_LAUNCH) is None

    def set_first_launch_complete(self) -> None:
        self.store.set_item(StorageKeys.FIRST_LAUNCH, False)

    # App version
    def get_stored_app_version(self) -> Optional[str]:
        value = self.store.get_item(StorageKeys.APP_VERSION)
        return value if isinstance(value, str) else None

    def set_app_version(self, version: str) -> None:
        self.store.set_item(StorageKeys.APP_VERSION, version)

    # Backup slot
    def save_backup(self, backup: BackupData) -> None:
        self.store.set_item(StorageKeys.BACKUP, backup_to_record(backup))

    def get_last_backup(self) -> Optional[BackupData]:
        record = self.store.get_item(StorageKeys.BACKUP)
        if record is None:
            return None
        try:
            return backup_from_record(record)
        except ValueError as e:
            logger.warning("Ignoring stored backup: %s", e)
            return None

    def get_backup_size(self) -> int:
        """Return the size in bytes of the stored backup text, 0 if absent."""
        try:
            raw = self.store.get_raw(StorageKeys.BACKUP)
        except StorageReadError as e:
            logger.warning("Error reading backup size: %s", e)
            return 0
        return len(raw.encode("utf-8")) if raw is not None else 0

    # Whole namespace
    def clear_all(self) -> None:
        self.store.clear()

    def storage_info(self) -> StorageInfo:
        """Summarize keys and stored size for this application's namespace."""
        try:
            keys = self.store.keys()
            total_size = 0
            for key in keys:
                raw = self.store.get_raw(key)
                if raw:
                    total_size += len(raw.encode("utf-8"))
        except StorageReadError as e:
            logger.error("Error getting storage info: %s", e)
            return StorageInfo(total_keys=0, total_size_bytes=0)
        return StorageInfo(total_keys=len(keys), total_size_bytes=total_size, keys=tuple(keys))
