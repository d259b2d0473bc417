"""Display helpers shared by commands."""

from decimal import Decimal

from bizledger.domain.entities import Transaction, TransactionType


def format_amount(amount: Decimal, symbol: str) -> str:
    return f"{symbol}{amount:,.2f}"


def format_signed(txn: Transaction, symbol: str) -> str:
    """Amount with a sign showing the direction of money."""
    sign = "+" if txn.type == TransactionType.INCOME else "-"
    return f"{sign}{format_amount(txn.amount, symbol)}"
