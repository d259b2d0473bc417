"""Default business and demo transactions for a fresh install."""

import random
from datetime import date, datetime, timedelta, UTC
from decimal import Decimal
from typing import Optional

from bizledger.domain.entities import Business, Transaction, TransactionStatus, TransactionType

DEFAULT_BUSINESS_ID = "biz_1"

INCOME_CATEGORIES = ["sales", "salary", "investment", "refund", "other"]
EXPENSE_CATEGORIES = [
    "purchases",
    "rent",
    "utilities",
    "marketing",
    "tax",
    "transport",
    "food",
    "entertainment",
    "healthcare",
    "education",
    "other",
]

_INCOME_SAMPLES = [
    ("Product Sales - Electronics", "sales"),
    ("Service Revenue - Consulting", "sales"),
    ("Monthly Salary", "salary"),
    ("Freelance Project Payment", "sales"),
    ("Investment Returns", "investment"),
    ("Customer Refund Return", "refund"),
    ("Online Store Sales", "sales"),
    ("Commission Earned", "sales"),
    ("Rental Income", "other"),
    ("Bonus Payment", "salary"),
]

_EXPENSE_SAMPLES = [
    ("Office Rent Payment", "rent"),
    ("Electricity Bill", "utilities"),
    ("Internet & Phone Bill", "utilities"),
    ("Raw Materials Purchase", "purchases"),
    ("Facebook Ads Campaign", "marketing"),
    ("Google Ads Spend", "marketing"),
    ("Transportation Cost", "transport"),
    ("Business Lunch Meeting", "food"),
    ("Office Supplies", "purchases"),
    ("Software Subscription", "purchases"),
    ("Tax Payment - Q4", "tax"),
    ("Insurance Premium", "other"),
    ("Equipment Maintenance", "purchases"),
    ("Training & Development", "education"),
]


def default_business(now: Optional[datetime] = None) -> Business:
    """The business every install starts with."""
    return Business(
        id=DEFAULT_BUSINESS_ID,
        name="My Business",
        created_at=now or datetime.now(UTC),
    )


def generate_sample_transactions(
    business_id: str = DEFAULT_BUSINESS_ID,
    count: int = 55,
    today: Optional[date] = None,
    seed: Optional[int] = None,
) -> list[Transaction]:
    """Generate demo transactions spread over the last 180 days, newest first."""
    rng = random.Random(seed)
    if today is None:
        today = date.today()
    now = datetime.now(UTC)

    samples = []
    for i in range(count):
        is_income = rng.random() > 0.45
        description, category = rng.choice(_INCOME_SAMPLES if is_income else _EXPENSE_SAMPLES)
        amount = rng.randint(5000, 54999) if is_income else rng.randint(1000, 30999)
        samples.append(
            Transaction(
                id=f"txn_sample_{i + 1}",
                type=TransactionType.INCOME if is_income else TransactionType.EXPENSE,
                amount=Decimal(amount),
                category=category,
                description=description,
                date=today - timedelta(days=rng.randrange(180)),
                time=f"{rng.randint(8, 19):02d}:{rng.randint(0, 59):02d}",
                status=TransactionStatus.COMPLETED if rng.random() > 0.1 else TransactionStatus.PENDING,
                business_id=business_id,
                created_at=now,
                updated_at=now,
            )
        )

    return sorted(samples, key=lambda t: t.date, reverse=True)
