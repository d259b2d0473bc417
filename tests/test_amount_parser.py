"""Tests for amount parsing."""

from decimal import Decimal

import pytest

from bizledger.utils.amount_parser import parse_amount


@pytest.mark.parametrize(
    "text, expected",
    [
        ("123.45", Decimal("123.45")),
        ("1,234.56", Decimal("1234.56")),
        ("৳5000", Decimal("5000")),
        ("$ 12", Decimal("12")),
        ("  7.5 ", Decimal("7.5")),
    ],
)
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "abc", "0", "-50", "NaN", "Infinity"])
def test_parse_amount_rejects(text):
    with pytest.raises(ValueError):
        parse_amount(text)
