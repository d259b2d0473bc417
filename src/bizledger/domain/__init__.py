"""Domain layer for bizledger application."""

from bizledger.domain.entities import (
    AppSettings,
    BackupData,
    Business,
    Transaction,
    TransactionFilters,
    TransactionStatus,
    TransactionType,
)
from bizledger.domain.errors import DomainError, StorageError

__all__ = [
    "AppSettings",
    "BackupData",
    "Business",
    "Transaction",
    "TransactionFilters",
    "TransactionStatus",
    "TransactionType",
    "DomainError",
    "StorageError",
]
