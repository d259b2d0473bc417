"""Tests for JSON helpers."""

import json
from decimal import Decimal

import pytest

from bizledger.utils.json_utils import dump_json, format_json, load_json


def test_decimals_written_as_numbers():
    assert dump_json({"a": Decimal("10"), "b": Decimal("2.50")}) == '{"a": 10, "b": 2.5}'


def test_decimals_beyond_float_precision_kept_as_text():
    value = Decimal("12345678901234.56789")

    encoded = dump_json({"amount": value})

    assert encoded == '{"amount": "12345678901234.56789"}'
    assert Decimal(load_json(encoded)["amount"]) == value


def test_load_reads_fractions_as_decimal():
    value = load_json('{"a": 0.1, "b": 3}')

    assert value["a"] == Decimal("0.1")
    assert isinstance(value["a"], Decimal)
    assert value["b"] == 3


def test_format_json_indents():
    assert format_json({"a": [1]}) == '{\n  "a": [\n    1\n  ]\n}'


def test_unknown_types_rejected():
    with pytest.raises(TypeError):
        dump_json({"when": object()})


def test_load_invalid():
    with pytest.raises(json.JSONDecodeError):
        load_json("{oops")
