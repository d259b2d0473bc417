"""JSON encoding helpers shared by the store and the backup exporter."""

import json
from decimal import Decimal
from typing import Any


def _encode_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        # Amounts are written as JSON numbers, integral values without a fraction.
        # A value a float can't hold exactly is written as a string instead.
        if value == value.to_integral_value():
            return int(value)
        as_float = float(value)
        if Decimal(repr(as_float)) == value:
            return as_float
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def dump_json(data: Any) -> str:
    """Serialize data compactly for storage."""
    return json.dumps(data, ensure_ascii=False, default=_encode_default)


def format_json(data: Any) -> str:
    """Serialize data as pretty-printed JSON text (2-space indent)."""
    return json.dumps(data, indent=2, ensure_ascii=False, default=_encode_default)


def load_json(text: str) -> Any:
    """Parse JSON text, reading non-integral numbers as Decimal.

    Raises:
        json.JSONDecodeError: If text is not valid JSON
    """
    return json.loads(text, parse_float=Decimal)
