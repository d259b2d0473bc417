"""Domain model entities for bizledger.

These are pure data classes representing business concepts, independent of
the stored JSON shape. Conversion to and from stored records lives in
``bizledger.storage.mappers``.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionType(str, Enum):
    """Direction of money for a transaction."""

    INCOME = "income"
    EXPENSE = "expense"


class TransactionStatus(str, Enum):
    """Only completed transactions count toward monetary aggregates."""

    COMPLETED = "completed"
    PENDING = "pending"


class BackupFrequency(str, Enum):
    """How often the automatic backup runs."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


@dataclass(frozen=True)
class Transaction:
    """Income or expense record owned by a business."""

    id: str
    type: TransactionType
    amount: Decimal
    category: str
    description: str
    date: date
    time: str
    status: TransactionStatus
    business_id: str
    notes: Optional[str] = None
    attachments: tuple[str, ...] = ()
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class Business:
    """Profit/loss scope under which transactions are recorded."""

    id: str
    name: str
    owner_name: str = ""
    phone: str = ""
    email: str = ""
    address: str = ""
    logo: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class AppSettings:
    """User preferences. Every field has a default so partial records merge cleanly."""

    language: str = "en"
    theme: str = "light"
    currency: str = "BDT"
    currency_symbol: str = "৳"
    notifications: bool = True
    daily_reminder: bool = False
    reminder_time: str = "09:00"
    auto_backup: bool = True
    backup_frequency: BackupFrequency = BackupFrequency.WEEKLY
    last_backup_date: Optional[datetime] = None
    pin_enabled: bool = False
    biometric_enabled: bool = False
    show_onboarding: bool = True


@dataclass(frozen=True)
class BackupPayload:
    """Snapshot of all domain state held by a backup.

    ``None`` marks a field that was absent from the backup record; restore
    leaves the corresponding live entity untouched.
    """

    transactions: Optional[tuple[Transaction, ...]] = None
    businesses: Optional[tuple[Business, ...]] = None
    settings: Optional[AppSettings] = None
    current_business_id: Optional[str] = None


@dataclass(frozen=True)
class BackupData:
    """Versioned point-in-time backup record."""

    version: str
    timestamp: datetime
    data: BackupPayload


@dataclass(frozen=True)
class TransactionFilters:
    """Optional filters for transaction queries.

    ``None`` or ``"all"`` disables the type, category and status filters.
    """

    type: Optional[str] = None
    category: Optional[str] = None
    status: Optional[str] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    search: Optional[str] = None


@dataclass(frozen=True)
class CategoryTotal:
    """Summed amount for one category."""

    category: str
    total: Decimal


@dataclass(frozen=True)
class TrendPoint:
    """Completed income and expense for one calendar month."""

    month: str
    period: str
    income: Decimal
    expense: Decimal


@dataclass(frozen=True)
class PeriodSummary:
    """Report for an inclusive date range within one business."""

    business_id: str
    start_date: date
    end_date: date
    income: Decimal
    expense: Decimal
    completed_count: int
    pending_count: int
    income_by_category: tuple[CategoryTotal, ...] = ()
    expense_by_category: tuple[CategoryTotal, ...] = ()

    @property
    def net(self) -> Decimal:
        return self.income - self.expense


@dataclass(frozen=True)
class Dashboard:
    """Dashboard metrics for the current business."""

    business_id: str
    today_income: Decimal
    today_expense: Decimal
    monthly_income: Decimal
    monthly_expense: Decimal
    yearly_income: Decimal
    yearly_expense: Decimal
    total_balance: Decimal
    pending_count: int
    trends: tuple[TrendPoint, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class StorageInfo:
    """Size summary of the application's key namespace."""

    total_keys: int
    total_size_bytes: int
    keys: tuple[str, ...] = ()

    @property
    def total_size_kb(self) -> float:
        return round(self.total_size_bytes / 1024, 2)


@dataclass(frozen=True)
class OperationResult:
    """Success flag plus a short human-readable message."""

    success: bool
    message: str


@dataclass(frozen=True)
class BackupInfo:
    """Summary of the backup slot."""

    exists: bool
    timestamp: Optional[datetime] = None
    size_bytes: int = 0

    @property
    def size_kb(self) -> float:
        return round(self.size_bytes / 1024, 2)
