"""Mapper functions to convert between domain entities and stored JSON records.

Stored records keep camelCase keys so that exported backups are readable by
any client of the same format. Mapping failures raise ValueError; callers
decide whether to skip the record or reject the whole payload.
"""

import logging
from datetime import datetime, UTC
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from bizledger.domain import entities as domain
from bizledger.utils.date_parser import parse_iso_date

logger = logging.getLogger(__name__)


def _format_timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if value in (None, ""):
        return None
    if not isinstance(value, str):
        raise ValueError(f"Expected an ISO-8601 timestamp, got {value!r}")
    parsed = datetime.fromisoformat(value)
    # Timestamps without an offset are treated as UTC
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _require_mapping(record: Any, kind: str) -> dict[str, Any]:
    if not isinstance(record, dict):
        raise ValueError(f"Malformed {kind} record: expected an object, got {type(record).__name__}")
    return record


def transaction_to_record(txn: domain.Transaction) -> dict[str, Any]:
    """Convert a Transaction entity to its stored record."""
    record: dict[str, Any] = {
        "id": txn.id,
        "type": txn.type.value,
        "amount": txn.amount,
        "category": txn.category,
        "description": txn.description,
        "date": txn.date.isoformat(),
        "time": txn.time,
        "status": txn.status.value,
        "businessId": txn.business_id,
        "attachments": list(txn.attachments),
    }
    if txn.notes is not None:
        record["notes"] = txn.notes
    if txn.created_at is not None:
        record["createdAt"] = _format_timestamp(txn.created_at)
    if txn.updated_at is not None:
        record["updatedAt"] = _format_timestamp(txn.updated_at)
    return record


def transaction_from_record(record: Any) -> domain.Transaction:
    """Convert a stored record to a Transaction entity.

    Raises:
        ValueError: If required fields are missing or malformed
    """
    record = _require_mapping(record, "transaction")
    try:
        attachments = record.get("attachments") or []
        return domain.Transaction(
            id=str(record["id"]),
            type=domain.TransactionType(record["type"]),
            amount=Decimal(str(record["amount"])),
            category=str(record.get("category", "")),
            description=str(record.get("description") or ""),
            date=parse_iso_date(record["date"]),
            time=str(record.get("time", "")),
            status=domain.TransactionStatus(record.get("status", "completed")),
            business_id=str(record["businessId"]),
            notes=record.get("notes"),
            attachments=tuple(str(item) for item in attachments),
            created_at=_parse_timestamp(record.get("createdAt")),
            updated_at=_parse_timestamp(record.get("updatedAt")),
        )
    except (KeyError, TypeError, ValueError, InvalidOperation) as e:
        raise ValueError(f"Malformed transaction record {record.get('id')!r}: {e}") from e


def business_to_record(business: domain.Business) -> dict[str, Any]:
    """Convert a Business entity to its stored record."""
    record: dict[str, Any] = {
        "id": business.id,
        "name": business.name,
        "ownerName": business.owner_name,
        "phone": business.phone,
        "email": business.email,
        "address": business.address,
    }
    if business.logo is not None:
        record["logo"] = business.logo
    if business.created_at is not None:
        record["createdAt"] = _format_timestamp(business.created_at)
    return record


def business_from_record(record: Any) -> domain.Business:
    """Convert a stored record to a Business entity.

    Raises:
        ValueError: If required fields are missing or malformed
    """
    record = _require_mapping(record, "business")
    try:
        return domain.Business(
            id=str(record["id"]),
            name=str(record["name"]),
            owner_name=str(record.get("ownerName", "")),
            phone=str(record.get("phone", "")),
            email=str(record.get("email", "")),
            address=str(record.get("address", "")),
            logo=record.get("logo"),
            created_at=_parse_timestamp(record.get("createdAt")),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Malformed business record {record.get('id')!r}: {e}") from e


def settings_to_record(settings: domain.AppSettings) -> dict[str, Any]:
    """Convert AppSettings to its flat stored record."""
    return {
        "language": settings.language,
        "theme": settings.theme,
        "currency": settings.currency,
        "currencySymbol": settings.currency_symbol,
        "notifications": settings.notifications,
        "dailyReminder": settings.daily_reminder,
        "reminderTime": settings.reminder_time,
        "autoBackup": settings.auto_backup,
        "backupFrequency": settings.backup_frequency.value,
        "lastBackupDate": _format_timestamp(settings.last_backup_date),
        "pinEnabled": settings.pin_enabled,
        "biometricEnabled": settings.biometric_enabled,
        "showOnboarding": settings.show_onboarding,
    }


def settings_from_record(record: Any) -> domain.AppSettings:
    """Merge a possibly partial stored record over the default settings.

    Unknown keys are ignored. Unusable values for the backup frequency or the
    last backup date fall back to their defaults.

    Raises:
        ValueError: If record is not an object
    """
    record = _require_mapping(record, "settings")
    defaults = domain.AppSettings()
    merged = {**settings_to_record(defaults), **record}

    try:
        frequency = domain.BackupFrequency(merged["backupFrequency"])
    except ValueError:
        logger.warning("Unknown backup frequency %r, using default", merged["backupFrequency"])
        frequency = defaults.backup_frequency

    try:
        last_backup = _parse_timestamp(merged["lastBackupDate"])
    except ValueError:
        logger.warning("Unreadable last backup date %r, ignoring", merged["lastBackupDate"])
        last_backup = None

    return domain.AppSettings(
        language=merged["language"],
        theme=merged["theme"],
        currency=merged["currency"],
        currency_symbol=merged["currencySymbol"],
        notifications=bool(merged["notifications"]),
        daily_reminder=bool(merged["dailyReminder"]),
        reminder_time=merged["reminderTime"],
        auto_backup=bool(merged["autoBackup"]),
        backup_frequency=frequency,
        last_backup_date=last_backup,
        pin_enabled=bool(merged["pinEnabled"]),
        biometric_enabled=bool(merged["biometricEnabled"]),
        show_onboarding=bool(merged["showOnboarding"]),
    )


def backup_to_record(backup: domain.BackupData) -> dict[str, Any]:
    """Convert BackupData to its stored/exported record."""
    data: dict[str, Any] = {}
    payload = backup.data
    if payload.transactions is not None:
        data["transactions"] = [transaction_to_record(t) for t in payload.transactions]
    if payload.businesses is not None:
        data["businesses"] = [business_to_record(b) for b in payload.businesses]
    if payload.settings is not None:
        data["settings"] = settings_to_record(payload.settings)
    if payload.current_business_id is not None:
        data["currentBusinessId"] = payload.current_business_id
    return {
        "version": backup.version,
        "timestamp": _format_timestamp(backup.timestamp),
        "data": data,
    }


def _optional_list(data: dict[str, Any], key: str) -> Optional[list[Any]]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, list):
        raise ValueError(f"Backup field '{key}' must be a list")
    return value


def backup_from_record(record: Any) -> domain.BackupData:
    """Convert a stored/imported record to BackupData.

    Fields absent from ``data`` stay None in the payload.

    Raises:
        ValueError: If the record lacks a version or data, or holds malformed entries
    """
    record = _require_mapping(record, "backup")
    if not record.get("version") or record.get("data") is None:
        raise ValueError("Backup record must contain both 'version' and 'data'")

    data = _require_mapping(record["data"], "backup data")
    transactions = _optional_list(data, "transactions")
    businesses = _optional_list(data, "businesses")
    settings = data.get("settings")
    current_business_id = data.get("currentBusinessId")

    try:
        timestamp = _parse_timestamp(record.get("timestamp"))
    except ValueError as e:
        raise ValueError(f"Backup timestamp is malformed: {e}") from e

    return domain.BackupData(
        version=str(record["version"]),
        timestamp=timestamp or datetime.min.replace(tzinfo=UTC),
        data=domain.BackupPayload(
            transactions=(
                tuple(transaction_from_record(t) for t in transactions)
                if transactions is not None
                else None
            ),
            businesses=(
                tuple(business_from_record(b) for b in businesses)
                if businesses is not None
                else None
            ),
            settings=settings_from_record(settings) if settings is not None else None,
            current_business_id=(
                str(current_business_id) if current_business_id is not None else None
            ),
        ),
    )
