from decimal import Decimal

import pytest

from utils.formatters import (
    format_currency, format_signed, format_thousands, parse_thousands, to_decimal
)
from utils.validators import validate_period_label, validate_year


def test_format_groups_thousands():
    assert format_thousands(Decimal('1234567')) == "1.234.567"
    assert format_thousands(1000) == "1.000"
    assert format_thousands(999) == "999"


def test_format_keeps_sign():
    assert format_thousands(-1234567) == "-1.234.567"
    assert format_thousands(-1) == "-1"


def test_format_rounds_to_whole_amounts():
    assert format_thousands(Decimal('1234.5')) == "1.235"
    assert format_thousands(Decimal('-1234.5')) == "-1.235"
    assert format_thousands(Decimal('-0.4')) == "0"


def test_format_zero_and_missing():
    assert format_thousands(0) == "0"
    assert format_thousands(None) == "0"


def test_parse_strips_separators():
    assert parse_thousands("1.234.567") == Decimal('1234567')
    assert parse_thousands("-1.234.567") == Decimal('-1234567')


@pytest.mark.parametrize("text", ["", None, "abc", "12a", "NaN", "   "])
def test_parse_never_raises(text):
    assert parse_thousands(text) == Decimal('0')


@pytest.mark.parametrize("value", [0, -1, 999, 1000, 1234567, -1234567])
def test_parse_reverses_format(value):
    assert parse_thousands(format_thousands(value)) == Decimal(value)


def test_currency_and_signed_display():
    assert format_currency(Decimal('5000000')) == "Rp 5.000.000"
    assert format_signed(Decimal('500000')) == "+500.000"
    assert format_signed(Decimal('-500000')) == "-500.000"
    assert format_signed(0) == "0"


def test_to_decimal_defaults_to_zero():
    assert to_decimal("1.5") == Decimal('1.5')
    assert to_decimal(True) == Decimal('0')
    assert to_decimal(float('inf')) == Decimal('0')


def test_period_label_validation():
    assert validate_period_label("Januari 2025")
    assert not validate_period_label("January 2025")
    assert not validate_period_label("Januari 25")
    assert validate_year("2031")
