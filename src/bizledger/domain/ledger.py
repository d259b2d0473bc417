"""Ledger service holding the in-memory transaction and business collections."""

import dataclasses
import logging
from datetime import date, datetime, UTC
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Optional

from bizledger.domain import aggregates
from bizledger.domain.entities import (
    Business,
    CategoryTotal,
    Dashboard,
    PeriodSummary,
    Transaction,
    TransactionFilters,
    TransactionStatus,
    TransactionType,
    TrendPoint,
)
from bizledger.domain.errors import (
    BusinessDeletionError,
    NotFoundError,
    ValidationError,
    business_not_found,
    invalid_choice,
    last_business_delete_blocked,
    transaction_not_found,
)
from bizledger.domain.migrations import MigrationRunner
from bizledger.domain.repository import StorageRepository
from bizledger.domain.samples import default_business, generate_sample_transactions
from bizledger.utils.date_parser import parse_iso_date, validate_time
from bizledger.utils.ids import generate_id

logger = logging.getLogger(__name__)

TRANSACTION_FIELDS = {
    "type",
    "amount",
    "category",
    "description",
    "date",
    "time",
    "status",
    "notes",
    "attachments",
    "business_id",
}
BUSINESS_FIELDS = {"name", "owner_name", "phone", "email", "address", "logo"}


def _coerce_type(value: Any) -> TransactionType:
    try:
        return TransactionType(value)
    except ValueError:
        raise ValidationError(invalid_choice("type", value, [t.value for t in TransactionType]))


def _coerce_status(value: Any) -> TransactionStatus:
    try:
        return TransactionStatus(value)
    except ValueError:
        raise ValidationError(invalid_choice("status", value, [s.value for s in TransactionStatus]))


def _coerce_amount(value: Any) -> Decimal:
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"Invalid amount {value!r}")
    if not amount.is_finite() or amount <= 0:
        raise ValidationError(f"Amount must be greater than zero, got {value!r}")
    return amount


def _coerce_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return parse_iso_date(value)
    except ValueError as e:
        raise ValidationError(str(e))


def _coerce_time(value: Any) -> str:
    try:
        return validate_time(value)
    except ValueError as e:
        raise ValidationError(str(e))


def _require_text(field: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} must not be empty")
    return value.strip()


def _optional_text(field: str, value: Any) -> Optional[str]:
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{field} must be text")
    return value


class LedgerService:
    """Service owning the transaction and business collections.

    Every mutation writes the affected collection through the repository
    before the in-memory state changes, and returns the new state.
    """

    def __init__(
        self,
        repository: StorageRepository,
        migration_runner: Optional[MigrationRunner] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize ledger service.

        Args:
            repository: Domain repository instance
            migration_runner: Runner applied before the first load, defaults to
                the built-in migrations
            clock: Returns the current time, defaults to UTC now
        """
        self.repository = repository
        self.migration_runner = migration_runner or MigrationRunner(repository)
        self.clock = clock or (lambda: datetime.now(UTC))
        self.transactions: list[Transaction] = []
        self.businesses: list[Business] = []
        self.current_business_id: str = ""
        self.is_initialized = False

    def load(self, seed_sample_data: bool = False) -> None:
        """Migrate stored data, then load every collection.

        Args:
            seed_sample_data: If True and no transactions are stored, generate
                demo transactions for the first business

        Raises:
            MigrationError: If a migration step fails
            StorageWriteError: If seeded defaults cannot be written
        """
        self.migration_runner.run()

        businesses = self.repository.get_businesses()
        if not businesses:
            businesses = [default_business(self.clock())]
            self.repository.save_businesses(businesses)
        self.businesses = businesses

        transactions = self.repository.get_transactions()
        if not transactions and seed_sample_data:
            transactions = generate_sample_transactions(businesses[0].id)
            self.repository.save_transactions(transactions)
        self.transactions = transactions or []

        saved_current = self.repository.get_current_business()
        if saved_current is not None and self.get_business(saved_current) is not None:
            self.current_business_id = saved_current
        else:
            if saved_current is not None:
                logger.warning("Current business %r no longer exists, switching to first", saved_current)
            self.current_business_id = businesses[0].id
            self.repository.save_current_business(self.current_business_id)

        self.is_initialized = True

    def refresh(self) -> None:
        """Reload every collection from storage."""
        self.load()

    def clear_all_data(self) -> None:
        """Erase the application's stored data and reseed the default business."""
        self.repository.clear_all()
        business = default_business(self.clock())
        self.repository.save_businesses([business])
        self.repository.save_current_business(business.id)
        self.transactions = []
        self.businesses = [business]
        self.current_business_id = business.id

    # Transactions
    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        for txn in self.transactions:
            if txn.id == transaction_id:
                return txn
        return None

    def _require_transaction(self, transaction_id: str) -> Transaction:
        txn = self.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return txn

    def add_transaction(
        self,
        type: str,
        amount: Any,
        category: str,
        description: str = "",
        date: Any = None,
        time: Optional[str] = None,
        status: str = "completed",
        notes: Optional[str] = None,
        attachments: tuple[str, ...] = (),
        business_id: Optional[str] = None,
    ) -> Transaction:
        """Record a transaction.

        Args:
            type: "income" or "expense"
            amount: Positive amount
            category: Category name
            description: Free text description
            date: Transaction date (date or YYYY-MM-DD), defaults to today
            time: HH:MM time, defaults to the current time
            status: "completed" or "pending"
            notes: Optional notes
            attachments: Attachment references
            business_id: Owning business, defaults to the current business

        Returns:
            The new transaction

        Raises:
            ValidationError: If a field is invalid
            NotFoundError: If the business doesn't exist
        """
        now = self.clock()
        business_id = business_id or self.current_business_id
        self._require_business(business_id)

        txn = Transaction(
            id=generate_id("txn"),
            type=_coerce_type(type),
            amount=_coerce_amount(amount),
            category=_require_text("Category", category),
            description=_optional_text("Description", description) or "",
            date=_coerce_date(date) if date is not None else now.date(),
            time=_coerce_time(time) if time is not None else now.strftime("%H:%M"),
            status=_coerce_status(status),
            business_id=business_id,
            notes=_optional_text("Notes", notes),
            attachments=tuple(attachments),
            created_at=now,
            updated_at=now,
        )

        updated = [txn, *self.transactions]
        self.repository.save_transactions(updated)
        self.transactions = updated
        return txn

    def update_transaction(self, transaction_id: str, **changes: Any) -> Transaction:
        """Update transaction fields and refresh its updated_at timestamp.

        Raises:
            NotFoundError: If the transaction or a new business doesn't exist
            ValidationError: If a field is unknown or invalid
        """
        txn = self._require_transaction(transaction_id)

        unknown = set(changes) - TRANSACTION_FIELDS
        if unknown:
            raise ValidationError(f"Unknown transaction field(s): {', '.join(sorted(unknown))}")

        if "type" in changes:
            changes["type"] = _coerce_type(changes["type"])
        if "amount" in changes:
            changes["amount"] = _coerce_amount(changes["amount"])
        if "category" in changes:
            changes["category"] = _require_text("Category", changes["category"])
        if "description" in changes:
            changes["description"] = _optional_text("Description", changes["description"]) or ""
        if "notes" in changes:
            changes["notes"] = _optional_text("Notes", changes["notes"])
        if "date" in changes:
            changes["date"] = _coerce_date(changes["date"])
        if "time" in changes:
            changes["time"] = _coerce_time(changes["time"])
        if "status" in changes:
            changes["status"] = _coerce_status(changes["status"])
        if "attachments" in changes:
            changes["attachments"] = tuple(changes["attachments"] or ())
        if "business_id" in changes:
            self._require_business(changes["business_id"])

        updated_txn = dataclasses.replace(txn, **changes, updated_at=self.clock())
        updated = [updated_txn if t.id == transaction_id else t for t in self.transactions]
        self.repository.save_transactions(updated)
        self.transactions = updated
        return updated_txn

    def delete_transaction(self, transaction_id: str) -> list[Transaction]:
        """Delete a transaction.

        Returns:
            The remaining transactions

        Raises:
            NotFoundError: If the transaction doesn't exist
        """
        self._require_transaction(transaction_id)
        updated = [t for t in self.transactions if t.id != transaction_id]
        self.repository.save_transactions(updated)
        self.transactions = updated
        return updated

    # Businesses
    def get_business(self, business_id: str) -> Optional[Business]:
        for business in self.businesses:
            if business.id == business_id:
                return business
        return None

    def _require_business(self, business_id: str) -> Business:
        business = self.get_business(business_id)
        if business is None:
            raise NotFoundError(business_not_found(business_id))
        return business

    @property
    def current_business(self) -> Optional[Business]:
        return self.get_business(self.current_business_id)

    def add_business(
        self,
        name: str,
        owner_name: str = "",
        phone: str = "",
        email: str = "",
        address: str = "",
        logo: Optional[str] = None,
    ) -> Business:
        """Create a business. The current business is not changed.

        Raises:
            ValidationError: If name is empty
        """
        business = Business(
            id=generate_id("biz"),
            name=_require_text("Business name", name),
            owner_name=owner_name,
            phone=phone,
            email=email,
            address=address,
            logo=logo,
            created_at=self.clock(),
        )
        updated = [*self.businesses, business]
        self.repository.save_businesses(updated)
        self.businesses = updated
        return business

    def update_business(self, business_id: str, **changes: Any) -> Business:
        """Update business fields.

        Raises:
            NotFoundError: If the business doesn't exist
            ValidationError: If a field is unknown or the name is empty
        """
        business = self._require_business(business_id)

        unknown = set(changes) - BUSINESS_FIELDS
        if unknown:
            raise ValidationError(f"Unknown business field(s): {', '.join(sorted(unknown))}")
        if "name" in changes:
            changes["name"] = _require_text("Business name", changes["name"])

        updated_business = dataclasses.replace(business, **changes)
        updated = [updated_business if b.id == business_id else b for b in self.businesses]
        self.repository.save_businesses(updated)
        self.businesses = updated
        return updated_business

    def delete_business(self, business_id: str) -> list[Business]:
        """Delete a business, keeping its transactions.

        If the deleted business was current, the first remaining business
        becomes current.

        Returns:
            The remaining businesses

        Raises:
            BusinessDeletionError: If it is the last business
            NotFoundError: If the business doesn't exist
        """
        if len(self.businesses) <= 1:
            raise BusinessDeletionError(last_business_delete_blocked(business_id))
        self._require_business(business_id)

        remaining = [b for b in self.businesses if b.id != business_id]
        self.repository.save_businesses(remaining)
        self.businesses = remaining

        if self.current_business_id == business_id:
            self.repository.save_current_business(remaining[0].id)
            self.current_business_id = remaining[0].id
        return remaining

    def set_current_business(self, business_id: str) -> Business:
        """Switch the current business.

        Raises:
            NotFoundError: If the business doesn't exist
        """
        business = self._require_business(business_id)
        self.repository.save_current_business(business_id)
        self.current_business_id = business_id
        return business

    # Aggregates for the current business
    def get_filtered_transactions(self, filters: TransactionFilters) -> list[Transaction]:
        return aggregates.filter_transactions(self.transactions, self.current_business_id, filters)

    def get_today_income(self, today: Optional[date] = None) -> Decimal:
        return aggregates.today_income(self.transactions, self.current_business_id, today)

    def get_today_expense(self, today: Optional[date] = None) -> Decimal:
        return aggregates.today_expense(self.transactions, self.current_business_id, today)

    def get_monthly_income(self, today: Optional[date] = None) -> Decimal:
        return aggregates.monthly_income(self.transactions, self.current_business_id, today)

    def get_monthly_expense(self, today: Optional[date] = None) -> Decimal:
        return aggregates.monthly_expense(self.transactions, self.current_business_id, today)

    def get_yearly_income(self, today: Optional[date] = None) -> Decimal:
        return aggregates.yearly_income(self.transactions, self.current_business_id, today)

    def get_yearly_expense(self, today: Optional[date] = None) -> Decimal:
        return aggregates.yearly_expense(self.transactions, self.current_business_id, today)

    def get_total_balance(self) -> Decimal:
        return aggregates.total_balance(self.transactions, self.current_business_id)

    def get_pending_count(self) -> int:
        return aggregates.pending_count(self.transactions, self.current_business_id)

    def get_category_totals(self, txn_type: str, today: Optional[date] = None) -> list[CategoryTotal]:
        return aggregates.category_totals(
            self.transactions, self.current_business_id, _coerce_type(txn_type), today
        )

    def get_monthly_trends(self, today: Optional[date] = None) -> list[TrendPoint]:
        return aggregates.monthly_trends(self.transactions, self.current_business_id, today)

    def get_period_summary(self, start: date, end: date) -> PeriodSummary:
        return aggregates.period_summary(self.transactions, self.current_business_id, start, end)

    def get_dashboard(self, today: Optional[date] = None) -> Dashboard:
        return aggregates.dashboard(self.transactions, self.current_business_id, today)
