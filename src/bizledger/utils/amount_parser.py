"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a positive Decimal.

    Transaction amounts are always stored as positive values; the direction
    of money is carried by the transaction type. Handles formats such as:
    - "123.45"
    - "৳123.45" or "$123.45"
    - "1,234.56"

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount greater than zero

    Raises:
        ValueError: If amount string cannot be parsed or is not positive
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    # Remove currency symbols
    amount_str = re.sub(r"[$€£¥₹৳]", "", amount_str)

    # Remove thousands separators
    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")

    if not amount.is_finite() or amount <= 0:
        raise ValueError(f"Amount must be greater than zero, got '{amount_str}'")
    return amount
