"""Tests for currency helpers."""

from decimal import Decimal

import pytest

from errors import ValidationError
from models.money import from_cents, parse_amount, to_cents


class TestParseAmount:
    """Tests for parse_amount."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("12.5", Decimal("12.50")),
            (" 7 ", Decimal("7.00")),
            (3, Decimal("3.00")),
            (0.1, Decimal("0.10")),
            (Decimal("2.675"), Decimal("2.68")),
        ],
    )
    def test_valid_amounts(self, value, expected):
        assert parse_amount(value) == expected

    @pytest.mark.parametrize("value", [None, True, "", "12,50", "NaN", "-Infinity", [1]])
    def test_invalid_amounts(self, value):
        with pytest.raises(ValidationError):
            parse_amount(value)

    @pytest.mark.parametrize("value", ["1e27", 10**26, "92233720368547759"])
    def test_amounts_beyond_cents_range(self, value):
        with pytest.raises(ValidationError, match="too large"):
            parse_amount(value)

    def test_largest_storable_amount(self):
        assert to_cents(parse_amount("92233720368547758.07")) == 2**63 - 1

    def test_field_name_in_message(self):
        with pytest.raises(ValidationError, match="Budget amount"):
            parse_amount(None, "Budget amount")


def test_cents_conversion():
    assert to_cents(Decimal("19.99")) == 1999
    assert to_cents(Decimal("0.30")) == 30
    assert from_cents(30) == Decimal("0.30")
    assert str(from_cents(1999)) == "19.99"
    assert str(from_cents(0)) == "0.00"
