"""Derived metrics over an in-memory transaction collection.

Every function scopes to one business id first, so transactions left behind
by a deleted business never leak into another business's numbers. Monetary
sums count completed transactions only; pending ones are counted separately.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from bizledger.domain.entities import (
    CategoryTotal,
    Dashboard,
    PeriodSummary,
    Transaction,
    TransactionFilters,
    TransactionStatus,
    TransactionType,
    TrendPoint,
)
from bizledger.utils.date_parser import get_date_range, month_bounds, trailing_month_starts

TREND_MONTHS = 6

_PERIODS = {"today": "today", "month": "this-month", "year": "this-year"}

ZERO = Decimal("0")


def date_range(period: str, today: Optional[date] = None) -> tuple[date, date]:
    """Inclusive range for ``today``, ``month`` or ``year`` ending on today.

    Raises:
        ValueError: If period is not one of today, month, year
    """
    if period not in _PERIODS:
        raise ValueError(f"Unknown period: '{period}'. Supported periods: today, month, year")
    return get_date_range(_PERIODS[period], today)


def _for_business(transactions: Iterable[Transaction], business_id: str) -> list[Transaction]:
    return [t for t in transactions if t.business_id == business_id]


def sum_completed(
    transactions: Iterable[Transaction],
    business_id: str,
    txn_type: TransactionType,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> Decimal:
    """Sum completed amounts of one type, optionally within [start, end]."""
    total = ZERO
    for t in _for_business(transactions, business_id):
        if t.type != txn_type or t.status != TransactionStatus.COMPLETED:
            continue
        if start is not None and t.date < start:
            continue
        if end is not None and t.date > end:
            continue
        total += t.amount
    return total


def _period_sum(
    transactions: Sequence[Transaction],
    business_id: str,
    txn_type: TransactionType,
    period: str,
    today: Optional[date],
) -> Decimal:
    start, end = date_range(period, today)
    return sum_completed(transactions, business_id, txn_type, start, end)


def today_income(transactions: Sequence[Transaction], business_id: str, today: Optional[date] = None) -> Decimal:
    return _period_sum(transactions, business_id, TransactionType.INCOME, "today", today)


def today_expense(transactions: Sequence[Transaction], business_id: str, today: Optional[date] = None) -> Decimal:
    return _period_sum(transactions, business_id, TransactionType.EXPENSE, "today", today)


def monthly_income(transactions: Sequence[Transaction], business_id: str, today: Optional[date] = None) -> Decimal:
    return _period_sum(transactions, business_id, TransactionType.INCOME, "month", today)


def monthly_expense(transactions: Sequence[Transaction], business_id: str, today: Optional[date] = None) -> Decimal:
    return _period_sum(transactions, business_id, TransactionType.EXPENSE, "month", today)


def yearly_income(transactions: Sequence[Transaction], business_id: str, today: Optional[date] = None) -> Decimal:
    return _period_sum(transactions, business_id, TransactionType.INCOME, "year", today)


def yearly_expense(transactions: Sequence[Transaction], business_id: str, today: Optional[date] = None) -> Decimal:
    return _period_sum(transactions, business_id, TransactionType.EXPENSE, "year", today)


def total_balance(transactions: Sequence[Transaction], business_id: str) -> Decimal:
    """Lifetime completed income minus completed expense."""
    income = sum_completed(transactions, business_id, TransactionType.INCOME)
    expense = sum_completed(transactions, business_id, TransactionType.EXPENSE)
    return income - expense


def pending_count(transactions: Sequence[Transaction], business_id: str) -> int:
    """Number of pending transactions, regardless of date."""
    return sum(
        1 for t in _for_business(transactions, business_id) if t.status == TransactionStatus.PENDING
    )


def group_by_category(
    transactions: Iterable[Transaction],
    business_id: str,
    txn_type: TransactionType,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> list[CategoryTotal]:
    """Completed totals per category, largest first.

    Ties keep the order in which categories were first encountered.
    """
    totals: dict[str, Decimal] = {}
    for t in _for_business(transactions, business_id):
        if t.type != txn_type or t.status != TransactionStatus.COMPLETED:
            continue
        if start is not None and t.date < start:
            continue
        if end is not None and t.date > end:
            continue
        totals[t.category] = totals.get(t.category, ZERO) + t.amount

    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return [CategoryTotal(category=category, total=total) for category, total in ranked]


def category_totals(
    transactions: Sequence[Transaction],
    business_id: str,
    txn_type: TransactionType,
    today: Optional[date] = None,
) -> list[CategoryTotal]:
    """Current-month completed totals per category, largest first."""
    start, end = date_range("month", today)
    return group_by_category(transactions, business_id, txn_type, start, end)


def monthly_trends(
    transactions: Sequence[Transaction], business_id: str, today: Optional[date] = None
) -> list[TrendPoint]:
    """Completed income and expense for the last six months, oldest first.

    Months without transactions are reported as zero.
    """
    if today is None:
        today = date.today()

    points = []
    for month_start in trailing_month_starts(today, TREND_MONTHS):
        start, end = month_bounds(month_start)
        points.append(
            TrendPoint(
                month=month_start.strftime("%b"),
                period=month_start.strftime("%Y-%m"),
                income=sum_completed(transactions, business_id, TransactionType.INCOME, start, end),
                expense=sum_completed(transactions, business_id, TransactionType.EXPENSE, start, end),
            )
        )
    return points


def _is_set(value: Optional[str]) -> bool:
    return bool(value) and value != "all"


def filter_transactions(
    transactions: Sequence[Transaction], business_id: str, filters: TransactionFilters
) -> list[Transaction]:
    """Transactions of one business matching every provided filter.

    The search text is checked last, against description or category,
    case-insensitively.
    """
    search = filters.search.lower() if filters.search else None

    def matches(t: Transaction) -> bool:
        if t.business_id != business_id:
            return False
        if _is_set(filters.type) and t.type.value != filters.type:
            return False
        if _is_set(filters.category) and t.category != filters.category:
            return False
        if _is_set(filters.status) and t.status.value != filters.status:
            return False
        if filters.date_from is not None and t.date < filters.date_from:
            return False
        if filters.date_to is not None and t.date > filters.date_to:
            return False
        if search:
            return search in t.description.lower() or search in t.category.lower()
        return True

    return [t for t in transactions if matches(t)]


def period_summary(
    transactions: Sequence[Transaction], business_id: str, start: date, end: date
) -> PeriodSummary:
    """Report totals and category breakdowns for [start, end]."""
    in_range = [t for t in _for_business(transactions, business_id) if start <= t.date <= end]
    completed = sum(1 for t in in_range if t.status == TransactionStatus.COMPLETED)
    return PeriodSummary(
        business_id=business_id,
        start_date=start,
        end_date=end,
        income=sum_completed(in_range, business_id, TransactionType.INCOME),
        expense=sum_completed(in_range, business_id, TransactionType.EXPENSE),
        completed_count=completed,
        pending_count=len(in_range) - completed,
        income_by_category=tuple(group_by_category(in_range, business_id, TransactionType.INCOME)),
        expense_by_category=tuple(group_by_category(in_range, business_id, TransactionType.EXPENSE)),
    )


def dashboard(
    transactions: Sequence[Transaction], business_id: str, today: Optional[date] = None
) -> Dashboard:
    """Bundle every dashboard metric for one business."""
    if today is None:
        today = date.today()
    return Dashboard(
        business_id=business_id,
        today_income=today_income(transactions, business_id, today),
        today_expense=today_expense(transactions, business_id, today),
        monthly_income=monthly_income(transactions, business_id, today),
        monthly_expense=monthly_expense(transactions, business_id, today),
        yearly_income=yearly_income(transactions, business_id, today),
        yearly_expense=yearly_expense(transactions, business_id, today),
        total_balance=total_balance(transactions, business_id),
        pending_count=pending_count(transactions, business_id),
        trends=tuple(monthly_trends(transactions, business_id, today)),
    )
