from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional, Union
from config.settings import CURRENCY_SYMBOL, THOUSANDS_SEPARATOR

Number = Union[Decimal, int, float, str]


def to_decimal(value: Optional[Number]) -> Decimal:
    """Coerce a stored or user-supplied amount to Decimal, 0 when unusable"""
    if value is None or isinstance(value, bool):
        return Decimal('0')
    if isinstance(value, Decimal):
        return value if value.is_finite() else Decimal('0')
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return Decimal('0')
    return result if result.is_finite() else Decimal('0')


def format_thousands(amount: Optional[Number]) -> str:
    """Format amount as a rounded integer with thousands grouping, e.g. -1.234.567"""
    value = to_decimal(amount)
    whole = int(abs(value).quantize(Decimal('1'), rounding=ROUND_HALF_UP))
    grouped = f"{whole:,}".replace(",", THOUSANDS_SEPARATOR)
    return f"-{grouped}" if value < 0 and whole != 0 else grouped


def parse_thousands(text: Optional[str]) -> Decimal:
    """Parse grouped text back to a number; anything unparseable is 0"""
    if not text:
        return Decimal('0')
    return to_decimal(str(text).replace(THOUSANDS_SEPARATOR, ""))


def format_currency(amount: Optional[Number], symbol: str = CURRENCY_SYMBOL) -> str:
    """Format currency amount"""
    return f"{symbol} {format_thousands(amount)}"


def format_signed(amount: Optional[Number]) -> str:
    """Format a delta with an explicit plus sign for increases"""
    value = to_decimal(amount)
    prefix = "+" if value > 0 else ""
    return f"{prefix}{format_thousands(value)}"
