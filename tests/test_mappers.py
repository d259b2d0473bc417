"""Tests for record mappers."""

from datetime import date, datetime, UTC
from decimal import Decimal

import pytest

from bizledger.domain.entities import (
    AppSettings,
    BackupData,
    BackupFrequency,
    BackupPayload,
    Business,
    TransactionStatus,
    TransactionType,
)
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


def test_transaction_record_uses_camel_case(make_transaction):
    txn = make_transaction(notes="paid cash", created_at=datetime(2024, 3, 1, tzinfo=UTC))

    record = transaction_to_record(txn)

    assert record["businessId"] == "biz_1"
    assert record["date"] == "2024-03-15"
    assert record["type"] == "income"
    assert record["notes"] == "paid cash"
    assert record["createdAt"] == "2024-03-01T00:00:00+00:00"
    assert record["attachments"] == []
    assert "updatedAt" not in record


def test_transaction_from_record():
    txn = transaction_from_record(
        {
            "id": "t1",
            "type": "expense",
            "amount": 250,
            "category": "rent",
            "description": "March rent",
            "date": "2024-03-01",
            "time": "09:15",
            "status": "pending",
            "businessId": "biz_1",
        }
    )

    assert txn.type == TransactionType.EXPENSE
    assert txn.status == TransactionStatus.PENDING
    assert txn.amount == Decimal("250")
    assert txn.date == date(2024, 3, 1)
    assert txn.attachments == ()
    assert txn.notes is None


def test_transaction_from_record_null_description_is_empty():
    txn = transaction_from_record(
        {
            "id": "t1",
            "type": "income",
            "amount": 10,
            "category": "sales",
            "description": None,
            "date": "2024-03-01",
            "businessId": "biz_1",
        }
    )

    assert txn.description == ""


def test_transaction_from_record_naive_timestamp_is_utc():
    txn = transaction_from_record(
        {
            "id": "t1",
            "type": "income",
            "amount": 1,
            "date": "2024-03-01",
            "businessId": "b",
            "createdAt": "2024-03-01T08:00:00",
        }
    )

    assert txn.created_at == datetime(2024, 3, 1, 8, tzinfo=UTC)


@pytest.mark.parametrize(
    "record",
    [
        "not a dict",
        {"id": "t1"},
        {"id": "t1", "type": "gift", "amount": 1, "date": "2024-03-01", "businessId": "b"},
        {"id": "t1", "type": "income", "amount": "abc", "date": "2024-03-01", "businessId": "b"},
        {"id": "t1", "type": "income", "amount": 1, "date": "2024-3-1", "businessId": "b"},
    ],
)
def test_transaction_from_record_rejects_malformed(record):
    with pytest.raises(ValueError):
        transaction_from_record(record)


def test_business_round_trip():
    business = Business(
        id="biz_2",
        name="Corner Shop",
        owner_name="Rahim",
        phone="0123",
        email="shop@example.com",
        address="Dhaka",
        created_at=datetime(2024, 1, 1, tzinfo=UTC),
    )

    record = business_to_record(business)

    assert record["ownerName"] == "Rahim"
    assert "logo" not in record
    assert business_from_record(record) == business


def test_business_from_record_requires_name():
    with pytest.raises(ValueError):
        business_from_record({"id": "biz_2"})


def test_settings_record_keys():
    record = settings_to_record(AppSettings())

    assert record["currencySymbol"] == "৳"
    assert record["backupFrequency"] == "weekly"
    assert record["lastBackupDate"] is None


def test_settings_partial_record_merges_over_defaults():
    settings = settings_from_record({"theme": "dark", "currency": "USD"})

    assert settings.theme == "dark"
    assert settings.currency == "USD"
    assert settings.language == "en"
    assert settings.auto_backup is True
    assert settings.backup_frequency == BackupFrequency.WEEKLY


def test_settings_unknown_keys_ignored():
    settings = settings_from_record({"fontSize": 14})

    assert settings == AppSettings()


def test_settings_invalid_frequency_falls_back_to_default():
    settings = settings_from_record({"backupFrequency": "hourly"})

    assert settings.backup_frequency == BackupFrequency.WEEKLY


def test_settings_invalid_last_backup_date_is_dropped():
    settings = settings_from_record({"lastBackupDate": "yesterday-ish"})

    assert settings.last_backup_date is None


def test_settings_from_non_mapping_rejected():
    with pytest.raises(ValueError):
        settings_from_record(["theme", "dark"])


def test_backup_record_omits_absent_fields(make_transaction):
    backup = BackupData(
        version="1.1.0",
        timestamp=datetime(2024, 3, 15, tzinfo=UTC),
        data=BackupPayload(transactions=(make_transaction(),)),
    )

    record = backup_to_record(backup)

    assert set(record) == {"version", "timestamp", "data"}
    assert set(record["data"]) == {"transactions"}


def test_backup_from_record_keeps_absent_fields_none():
    backup = backup_from_record(
        {
            "version": "1.0.0",
            "timestamp": "2024-03-15T00:00:00+00:00",
            "data": {"settings": {"theme": "dark"}},
        }
    )

    assert backup.version == "1.0.0"
    assert backup.data.transactions is None
    assert backup.data.businesses is None
    assert backup.data.current_business_id is None
    assert backup.data.settings.theme == "dark"


@pytest.mark.parametrize(
    "record",
    [
        {"data": {"transactions": []}},
        {"version": "1.0.0"},
        {"version": "1.0.0", "data": "everything"},
        {"version": "1.0.0", "data": {"transactions": "none"}},
        [],
    ],
)
def test_backup_from_record_rejects_malformed(record):
    with pytest.raises(ValueError):
        backup_from_record(record)
