"""Tests for default data and demo transactions."""

from datetime import date, timedelta

from bizledger.domain.entities import TransactionType
from bizledger.domain.samples import (
    DEFAULT_BUSINESS_ID,
    EXPENSE_CATEGORIES,
    INCOME_CATEGORIES,
    default_business,
    generate_sample_transactions,
)


def test_default_business():
    business = default_business()

    assert business.id == DEFAULT_BUSINESS_ID
    assert business.name == "My Business"
    assert business.created_at is not None


def test_sample_transactions_are_deterministic_with_seed():
    today = date(2024, 3, 15)

    first = generate_sample_transactions("biz_7", count=20, today=today, seed=42)
    second = generate_sample_transactions("biz_7", count=20, today=today, seed=42)

    assert [(t.id, t.amount, t.date) for t in first] == [(t.id, t.amount, t.date) for t in second]


def test_sample_transactions_shape():
    today = date(2024, 3, 15)

    transactions = generate_sample_transactions("biz_7", count=30, today=today, seed=1)

    assert len(transactions) == 30
    assert len({t.id for t in transactions}) == 30
    assert all(t.business_id == "biz_7" for t in transactions)
    assert all(t.amount > 0 for t in transactions)
    assert all(today - timedelta(days=179) <= t.date <= today for t in transactions)
    assert [t.date for t in transactions] == sorted((t.date for t in transactions), reverse=True)
    for t in transactions:
        categories = INCOME_CATEGORIES if t.type == TransactionType.INCOME else EXPENSE_CATEGORIES
        assert t.category in categories
