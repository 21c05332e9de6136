from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Mapping, Optional
import logging
from config.settings import MONTH_NAMES
from models.settings import AttendanceCategory, category_map
from utils.formatters import to_decimal
from utils.validators import validate_month_name, validate_year

logger = logging.getLogger(__name__)


class EarningKey(str, Enum):
    """Earnings line items"""
    BASE_PAY = "pokok"
    TRANSPORT = "transport"
    MEAL = "makan"
    ALLOWANCE = "premi"
    POSITIVE_CORRECTION = "koreksi_plus"


class DeductionKey(str, Enum):
    """Deduction line items"""
    LOAN_INSTALLMENT = "cicilan_hutang"
    COOPERATIVE_SAVINGS = "ksp"
    SOCIAL_INSURANCE_1 = "jamsostek"
    SOCIAL_INSURANCE_2 = "bpjs"
    NEGATIVE_CORRECTION = "koreksi_minus"


# Line items computed by the engine, never typed in
DERIVED_EARNINGS = frozenset({EarningKey.BASE_PAY, EarningKey.POSITIVE_CORRECTION})
DERIVED_DEDUCTIONS = frozenset({DeductionKey.NEGATIVE_CORRECTION})


def breakdown(keys, values: Optional[Mapping[Any, Any]]) -> Dict[Any, Decimal]:
    """Normalize a line-item mapping to the fixed key set, missing as 0"""
    values = values or {}
    known = {k.value for k in keys}
    unknown = [k for k in values if str(getattr(k, 'value', k)) not in known]
    if unknown:
        logger.debug(f"Ignoring unknown line items: {unknown}")
    return {k: to_decimal(values.get(k, values.get(k.value))) for k in keys}


@dataclass(frozen=True)
class Period:
    """Pay period: Indonesian month name plus year"""
    month: str
    year: str

    def __post_init__(self):
        object.__setattr__(self, 'year', str(self.year))
        if not validate_month_name(self.month):
            raise ValueError(f"Unknown month name: {self.month}")
        if not validate_year(self.year):
            raise ValueError(f"Year must have 4 digits: {self.year}")

    @classmethod
    def parse(cls, label: str) -> 'Period':
        month, _, year = str(label).partition(' ')
        return cls(month=month, year=year)

    @classmethod
    def current(cls, today: Optional[date] = None) -> 'Period':
        today = today or date.today()
        return cls(month=MONTH_NAMES[today.month - 1], year=str(today.year))

    def __str__(self):
        return f"{self.month} {self.year}"


@dataclass
class AttendanceInput:
    """Day counts per attendance category for one period"""
    days: Dict[AttendanceCategory, Decimal] = field(default_factory=dict)

    def __post_init__(self):
        self.days = category_map(self.days)

    def __getitem__(self, category: AttendanceCategory) -> Decimal:
        return self.days[AttendanceCategory(category)]

    def with_days(self, category: Any, value: Any) -> 'AttendanceInput':
        days = dict(self.days)
        days[AttendanceCategory(category)] = to_decimal(value)
        return AttendanceInput(days)

    def to_dict(self) -> Dict[str, Decimal]:
        return {c.value: self.days[c] for c in AttendanceCategory}

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> 'AttendanceInput':
        return cls(dict(data or {}))


@dataclass
class SalaryRecord:
    """Complete salary slip for one period"""
    id: str
    period: Period
    net_total: Decimal
    earnings: Dict[EarningKey, Decimal]
    deductions: Dict[DeductionKey, Decimal]
    attendance: AttendanceInput = field(default_factory=AttendanceInput)

    @property
    def total_earnings(self) -> Decimal:
        return sum(self.earnings.values(), Decimal('0'))

    @property
    def total_deductions(self) -> Decimal:
        return sum(self.deductions.values(), Decimal('0'))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'periode': str(self.period),
            'total': self.net_total,
            'detailMasuk': {k.value: v for k, v in self.earnings.items()},
            'detailPotong': {k.value: v for k, v in self.deductions.items()},
            'detailAbsensi': self.attendance.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'SalaryRecord':
        """Rebuild a stored record; the stored total is kept as saved"""
        earnings = breakdown(EarningKey, data.get('detailMasuk'))
        deductions = breakdown(DeductionKey, data.get('detailPotong'))
        if data.get('total') is None:
            net_total = sum(earnings.values(), Decimal('0')) - sum(deductions.values(), Decimal('0'))
        else:
            net_total = to_decimal(data['total'])
        return cls(
            id=str(data['id']),
            period=Period.parse(data['periode']),
            net_total=net_total,
            earnings=earnings,
            deductions=deductions,
            attendance=AttendanceInput.from_dict(data.get('detailAbsensi')),
        )


class Trend(str, Enum):
    """How a delta reads from the payee's point of view"""
    IMPROVED = "improved"
    WORSENED = "worsened"
    UNCHANGED = "unchanged"


@dataclass
class PayrollDiff:
    """Deltas between a record and the one before it in history"""
    record_id: str
    previous_id: Optional[str] = None
    net_delta: Optional[Decimal] = None
    earnings_delta: Dict[EarningKey, Decimal] = field(default_factory=dict)
    deductions_delta: Dict[DeductionKey, Decimal] = field(default_factory=dict)

    @property
    def has_previous(self) -> bool:
        return self.previous_id is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'record_id': self.record_id,
            'previous_id': self.previous_id,
            'net_delta': self.net_delta,
            'earnings_delta': {k.value: v for k, v in self.earnings_delta.items()},
            'deductions_delta': {k.value: v for k, v in self.deductions_delta.items()},
        }
