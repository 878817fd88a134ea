"""Tests for decimal money helpers."""

from decimal import Decimal

from beautycatalog.core.money import money, percent, round_money, to_decimal


class TestRoundMoney:
    def test_bankers_rounding(self):
        assert round_money(Decimal("2.345")) == Decimal("2.34")
        assert round_money(Decimal("2.355")) == Decimal("2.36")

    def test_custom_places(self):
        assert round_money(Decimal("1.23456"), places=3) == Decimal("1.235")


class TestToDecimal:
    def test_parses_strings_and_numbers(self):
        assert to_decimal("12.50") == Decimal("12.50")
        assert to_decimal(3) == Decimal("3")

    def test_invalid_values_return_default(self):
        assert to_decimal("abc") is None
        assert to_decimal("", default=Decimal("0")) == Decimal("0")
        assert to_decimal(None) is None

    def test_non_finite_values_are_rejected(self):
        assert to_decimal("NaN") is None
        assert to_decimal("Infinity") is None


def test_money_renders_two_decimals():
    assert money(Decimal("10")) == "10.00"
    assert money("3.456") == "3.46"
    assert money(None) is None


def test_percent_of_zero_is_zero():
    assert percent(Decimal("5"), Decimal("0")) == Decimal("0.00")
    assert percent(Decimal("100"), Decimal("220")) == Decimal("45.45")
