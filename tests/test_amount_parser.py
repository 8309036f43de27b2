"""Tests for amount parsing."""

from decimal import Decimal

import pytest

from renqing.utils.amount_parser import coerce_amount, parse_amount


@pytest.mark.parametrize(
    "text,expected",
    [
        ("100", Decimal("100")),
        ("88.88", Decimal("88.88")),
        ("¥1,000", Decimal("1000")),
        ("￥666", Decimal("666")),
        ("$123.45", Decimal("123.45")),
        ("  200  ", Decimal("200")),
        ("0", Decimal("0")),
    ],
)
def test_parse_amount(text, expected):
    """Test parsing amounts typed by the user."""
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["", "  ", "abc", "-50", "(50)", "Infinity", "NaN"])
def test_parse_amount_invalid(text):
    """Test that empty, non-numeric and negative amounts are rejected."""
    with pytest.raises(ValueError):
        parse_amount(text)


@pytest.mark.parametrize(
    "value,expected",
    [
        (100, Decimal("100")),
        (88.88, Decimal("88.88")),
        (Decimal("5.5"), Decimal("5.5")),
        ("1,200", Decimal("1200")),
    ],
)
def test_coerce_amount(value, expected):
    """Test converting amounts read from ledger files."""
    assert coerce_amount(value) == expected


@pytest.mark.parametrize("value", [True, None, [], -1, -0.5, float("nan"), float("inf")])
def test_coerce_amount_invalid(value):
    """Test that booleans, non-numbers and negatives are rejected."""
    with pytest.raises(ValueError):
        coerce_amount(value)
