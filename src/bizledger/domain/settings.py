"""Settings service: preferences, backups seen from the user's side, and the PIN lock."""

import dataclasses
import hashlib
import hmac
import logging
import re
import secrets
from datetime import datetime, UTC
from typing import Any, Callable, Optional

from bizledger.domain.backup import BackupService
from bizledger.domain.entities import (
    AppSettings,
    BackupFrequency,
    BackupInfo,
    OperationResult,
    StorageInfo,
)
from bizledger.domain.errors import (
    ImportFormatError,
    StorageWriteError,
    ValidationError,
    invalid_choice,
)
from bizledger.domain.repository import StorageRepository
from bizledger.utils.date_parser import validate_time

logger = logging.getLogger(__name__)

PIN_PATTERN = re.compile(r"^\d{4}$")
PIN_HASH_SCHEME = "pbkdf2_sha256"
PIN_HASH_ITERATIONS = 200_000

_BOOL_SETTINGS = {
    "notifications",
    "daily_reminder",
    "auto_backup",
    "pin_enabled",
    "biometric_enabled",
    "show_onboarding",
}
_TRUE_WORDS = {"1", "true", "yes", "on"}
_FALSE_WORDS = {"0", "false", "no", "off"}


def hash_pin(pin: str, salt: Optional[str] = None, iterations: int = PIN_HASH_ITERATIONS) -> str:
    """Return a salted PBKDF2-SHA256 credential string for pin."""
    if salt is None:
        salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", pin.encode("utf-8"), salt.encode("utf-8"), iterations)
    return f"{PIN_HASH_SCHEME}${iterations}${salt}${digest.hex()}"


def check_pin(pin: str, stored: str) -> bool:
    """Check pin against a stored credential.

    Credentials written before hashing was introduced hold the PIN itself and
    are compared directly.
    """
    if not stored.startswith(f"{PIN_HASH_SCHEME}$"):
        return hmac.compare_digest(pin.encode("utf-8"), stored.encode("utf-8"))
    try:
        _, iterations, salt, _ = stored.split("$")
        expected = hash_pin(pin, salt=salt, iterations=int(iterations))
    except ValueError:
        logger.warning("Stored PIN credential is malformed")
        return False
    return hmac.compare_digest(expected, stored)


def parse_setting_value(name: str, text: str) -> Any:
    """Convert a command-line value to the type of setting ``name``.

    Raises:
        ValidationError: If the setting is unknown or the value can't be converted
    """
    if name not in AppSettings.__dataclass_fields__:
        raise ValidationError(invalid_choice("setting", name, sorted(AppSettings.__dataclass_fields__)))

    if name in _BOOL_SETTINGS:
        word = text.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
        raise ValidationError(f"Invalid value for {name}: {text!r}. Expected true or false")
    if name == "last_backup_date":
        if text.strip().lower() in ("", "none", "never"):
            return None
        try:
            return datetime.fromisoformat(text.strip())
        except ValueError:
            raise ValidationError(f"Invalid value for {name}: {text!r}. Expected an ISO timestamp")
    return text


class SettingsService:
    """Service for user preferences and the security settings."""

    def __init__(
        self,
        repository: StorageRepository,
        backup_service: Optional[BackupService] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize settings service.

        Args:
            repository: Domain repository instance
            backup_service: Backup service, created from repository if omitted
            clock: Returns the current time, defaults to UTC now
        """
        self.repository = repository
        self.backup_service = backup_service or BackupService(repository)
        self.clock = clock or (lambda: datetime.now(UTC))
        self.settings = AppSettings()

    def load(self) -> AppSettings:
        """Load settings merged over defaults; saves the defaults on first run."""
        stored = self.repository.get_settings()
        if stored is None:
            stored = AppSettings()
            self.repository.save_settings(stored)
        self.settings = stored
        return stored

    def _coerce(self, changes: dict[str, Any]) -> dict[str, Any]:
        unknown = set(changes) - set(AppSettings.__dataclass_fields__)
        if unknown:
            raise ValidationError(f"Unknown setting(s): {', '.join(sorted(unknown))}")

        for name in _BOOL_SETTINGS & set(changes):
            if not isinstance(changes[name], bool):
                raise ValidationError(f"{name} must be true or false")
        if "backup_frequency" in changes:
            try:
                changes["backup_frequency"] = BackupFrequency(changes["backup_frequency"])
            except ValueError:
                raise ValidationError(
                    invalid_choice(
                        "backup frequency",
                        changes["backup_frequency"],
                        [f.value for f in BackupFrequency],
                    )
                )
        if "reminder_time" in changes:
            try:
                changes["reminder_time"] = validate_time(changes["reminder_time"])
            except ValueError as e:
                raise ValidationError(str(e))
        if changes.get("last_backup_date") is not None:
            value = changes["last_backup_date"]
            if not isinstance(value, datetime):
                raise ValidationError("last_backup_date must be a timestamp")
            if value.tzinfo is None:
                changes["last_backup_date"] = value.replace(tzinfo=UTC)
        return changes

    def update(self, **changes: Any) -> AppSettings:
        """Apply changes over the current settings and save them.

        Raises:
            ValidationError: If a setting is unknown or a value is invalid
        """
        updated = dataclasses.replace(self.settings, **self._coerce(dict(changes)))
        self.repository.save_settings(updated)
        self.settings = updated
        return updated

    def reset(self) -> AppSettings:
        """Restore and save the default settings."""
        defaults = AppSettings()
        self.repository.save_settings(defaults)
        self.settings = defaults
        return defaults

    # Backups
    def create_backup(self) -> OperationResult:
        try:
            backup = self.backup_service.create_backup(now=self.clock())
            self.update(last_backup_date=backup.timestamp)
        except StorageWriteError as e:
            logger.error("Backup error: %s", e)
            return OperationResult(False, "Failed to create backup. Please try again.")
        return OperationResult(
            True, f"Backup created successfully at {_format_timestamp(backup.timestamp)}"
        )

    def restore_backup(self) -> OperationResult:
        backup = self.backup_service.get_last_backup()
        if backup is None:
            return OperationResult(False, "No backup found to restore.")
        try:
            self.backup_service.restore_from_backup(backup)
        except StorageWriteError as e:
            logger.error("Restore error: %s", e)
            return OperationResult(False, "Failed to restore backup. Please try again.")
        self.load()
        return OperationResult(
            True, f"Data restored from backup created on {_format_timestamp(backup.timestamp)}"
        )

    def backup_info(self) -> BackupInfo:
        return self.backup_service.backup_info()

    def export_data(self) -> str:
        """Return a fresh backup as JSON text.

        Raises:
            StorageWriteError: If the backup cannot be written
        """
        return self.backup_service.export_backup_as_json(now=self.clock())

    def import_data(self, text: str) -> OperationResult:
        try:
            backup = self.backup_service.parse_backup_json(text)
        except ImportFormatError as e:
            logger.error("Error importing backup: %s", e)
            return OperationResult(False, "Invalid backup file format.")
        try:
            self.backup_service.restore_from_backup(backup)
        except StorageWriteError as e:
            logger.error("Import error: %s", e)
            return OperationResult(False, "Failed to import data. Please check the file format.")
        self.load()
        return OperationResult(True, "Data imported successfully.")

    def storage_info(self) -> StorageInfo:
        return self.repository.storage_info()

    # Security
    def has_pin(self) -> bool:
        return self.repository.get_pin_code() is not None

    def set_pin(self, pin: str) -> None:
        """Store a hashed 4-digit PIN and enable the PIN lock.

        Raises:
            ValidationError: If pin is not exactly four digits
        """
        if not isinstance(pin, str) or not PIN_PATTERN.match(pin):
            raise ValidationError("PIN must be exactly 4 digits")
        self.repository.save_pin_code(hash_pin(pin))
        self.update(pin_enabled=True)

    def verify_pin(self, pin: str) -> bool:
        """Return True if pin matches the stored PIN. False when no PIN is set."""
        stored = self.repository.get_pin_code()
        if stored is None:
            return False
        return check_pin(pin, stored)

    def clear_pin(self) -> None:
        """Remove the stored PIN and disable the PIN lock."""
        self.repository.remove_pin_code()
        self.update(pin_enabled=False)

    def set_biometric_enabled(self, enabled: bool) -> AppSettings:
        self.repository.set_biometric_enabled(enabled)
        return self.update(biometric_enabled=enabled)

    def is_first_launch(self) -> bool:
        return self.repository.is_first_launch()

    def complete_onboarding(self) -> AppSettings:
        """Mark the first launch as done and stop showing onboarding."""
        self.repository.set_first_launch_complete()
        return self.update(show_onboarding=False)


def _format_timestamp(value: datetime) -> str:
    return value.astimezone().strftime("%Y-%m-%d %H:%M:%S")
