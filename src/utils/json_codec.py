from decimal import Decimal
from enum import Enum
from typing import Any

import simplejson


def to_json_number(value: Decimal):
    """Whole amounts as int, everything else as float"""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def _default(obj: Any):
    if isinstance(obj, Enum):
        return obj.value
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def dumps(obj: Any, **kwargs) -> str:
    """Serialize with Decimal written digit for digit"""
    return simplejson.dumps(obj, use_decimal=True, default=_default, **kwargs)


def loads(text: str) -> Any:
    """Parse JSON keeping money exact"""
    return simplejson.loads(text, use_decimal=True)
