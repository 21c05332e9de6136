from dataclasses import dataclass, field, replace
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Mapping, Optional
from utils.formatters import to_decimal


class AttendanceCategory(str, Enum):
    """Attendance categories counted per pay period"""
    SICK = "sakit"
    EXCUSED = "izin"
    UNEXCUSED_ABSENCE = "alpha"
    LEAVE = "cuti"
    LATENESS = "terlambat"
    OVERTIME = "overtime"
    EXTRA_SHIFT = "extra"
    INCENTIVE = "imt"


DEFAULT_MULTIPLIERS = {
    AttendanceCategory.SICK: Decimal('1'),
    AttendanceCategory.EXCUSED: Decimal('1'),
    AttendanceCategory.UNEXCUSED_ABSENCE: Decimal('2'),
    AttendanceCategory.LEAVE: Decimal('0'),
    AttendanceCategory.LATENESS: Decimal('500'),
    AttendanceCategory.OVERTIME: Decimal('1.5'),
    AttendanceCategory.EXTRA_SHIFT: Decimal('1'),
    AttendanceCategory.INCENTIVE: Decimal('1'),
}


def category_map(values: Optional[Mapping[Any, Any]]) -> Dict[AttendanceCategory, Decimal]:
    """Normalize a category-keyed mapping to exactly the 8 categories, missing as 0"""
    values = values or {}
    result = {}
    for category in AttendanceCategory:
        raw = values.get(category, values.get(category.value))
        result[category] = to_decimal(raw)
    return result


@dataclass
class SalarySettings:
    """Fixed salary configuration shared by every slip"""
    daily_rate: Decimal = Decimal('0')
    fixed_allowance: Decimal = Decimal('0')
    cooperative_savings: Decimal = Decimal('0')
    social_insurance_1: Decimal = Decimal('0')
    social_insurance_2: Decimal = Decimal('0')
    multipliers: Dict[AttendanceCategory, Decimal] = field(
        default_factory=lambda: dict(DEFAULT_MULTIPLIERS)
    )

    # Wire names used by the stored JSON and backup payload
    FIELD_KEYS = {
        'daily_rate': 'harian',
        'fixed_allowance': 'premi',
        'cooperative_savings': 'ksp',
        'social_insurance_1': 'jamsostek',
        'social_insurance_2': 'bpjs',
    }

    def __post_init__(self):
        for name in self.FIELD_KEYS:
            setattr(self, name, to_decimal(getattr(self, name)))
        self.multipliers = category_map(self.multipliers)

    def multiplier(self, category: AttendanceCategory) -> Decimal:
        return self.multipliers.get(category, Decimal('0'))

    def with_field(self, name: str, value: Any) -> 'SalarySettings':
        """Return a copy with one fixed field changed; accepts attribute or wire name"""
        attr = self.resolve_field_name(name)
        return replace(self, **{attr: to_decimal(value)}, multipliers=dict(self.multipliers))

    def with_multiplier(self, category: Any, value: Any) -> 'SalarySettings':
        """Return a copy with one attendance multiplier changed"""
        multipliers = dict(self.multipliers)
        multipliers[AttendanceCategory(category)] = to_decimal(value)
        return replace(self, multipliers=multipliers)

    @classmethod
    def resolve_field_name(cls, name: str) -> str:
        if name in cls.FIELD_KEYS:
            return name
        for attr, key in cls.FIELD_KEYS.items():
            if key == name:
                return attr
        raise ValueError(f"Unknown settings field: {name}")

    def to_dict(self) -> Dict[str, Any]:
        data = {key: getattr(self, attr) for attr, key in self.FIELD_KEYS.items()}
        data['persen'] = {c.value: self.multipliers[c] for c in AttendanceCategory}
        return data

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> 'SalarySettings':
        """Build settings from stored JSON; missing fields default to 0"""
        data = data or {}
        kwargs = {attr: data.get(key) for attr, key in cls.FIELD_KEYS.items()}
        return cls(**kwargs, multipliers=category_map(data.get('persen')))
