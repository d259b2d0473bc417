"""Shared pytest fixtures for bizledger tests."""

import os
import tempfile
from datetime import date, datetime, UTC
from decimal import Decimal

import pytest

from bizledger.domain.backup import BackupService
from bizledger.domain.entities import (
    Business,
    Transaction,
    TransactionStatus,
    TransactionType,
)
from bizledger.domain.ledger import LedgerService
from bizledger.domain.repository import StorageRepository
from bizledger.domain.settings import SettingsService
from bizledger.storage.factories import create_sqlite_store

FIXED_NOW = datetime(2024, 3, 15, 10, 30, tzinfo=UTC)


@pytest.fixture
def db_path():
    """Create a temporary database file path."""
    fd, path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    yield path

    if os.path.exists(path):
        os.unlink(path)


@pytest.fixture
def temp_store(db_path):
    """Create a key-value store on a temporary database."""
    store = create_sqlite_store(database_path=db_path)
    store.connect()
    store.initialize_schema()

    yield store

    store.disconnect()


@pytest.fixture
def repository(temp_store):
    """Create a StorageRepository over the temporary store."""
    return StorageRepository(temp_store)


@pytest.fixture
def clock():
    """Fixed clock returning FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def ledger(repository, clock):
    """Create a loaded LedgerService with the default business."""
    service = LedgerService(repository, clock=clock)
    service.load()
    return service


@pytest.fixture
def backup_service(repository):
    """Create a BackupService."""
    return BackupService(repository)


@pytest.fixture
def settings_service(repository, backup_service, clock):
    """Create a loaded SettingsService."""
    service = SettingsService(repository, backup_service=backup_service, clock=clock)
    service.load()
    return service


@pytest.fixture
def make_transaction():
    """Factory for Transaction entities with sensible defaults."""

    def _make(
        id="txn_1",
        type=TransactionType.INCOME,
        amount="100",
        category="sales",
        description="Sale",
        date=date(2024, 3, 15),
        time="10:00",
        status=TransactionStatus.COMPLETED,
        business_id="biz_1",
        **kwargs,
    ):
        return Transaction(
            id=id,
            type=TransactionType(type),
            amount=Decimal(amount),
            category=category,
            description=description,
            date=date,
            time=time,
            status=TransactionStatus(status),
            business_id=business_id,
            **kwargs,
        )

    return _make


@pytest.fixture
def sample_business():
    return Business(id="biz_1", name="My Business", created_at=FIXED_NOW)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
