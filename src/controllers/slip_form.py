import logging
from decimal import Decimal
from typing import Any, Dict, Optional
from models.errors import DerivedFieldError
from models.payroll import (
    AttendanceInput, DeductionKey, EarningKey, Period, SalaryRecord,
    DERIVED_DEDUCTIONS, DERIVED_EARNINGS,
)
from models.settings import SalarySettings
from processors.attendance_resolver import resolve_attendance
from processors.payroll_aggregator import default_deductions, default_earnings
from utils.formatters import to_decimal

logger = logging.getLogger(__name__)


class SlipForm:
    """
    One salary slip input session.

    A form is either in new-record mode (no ``edit_id``), where earnings and
    deductions are pre-filled from settings, or in edit mode, where they are
    loaded from an existing record. In both modes the correction line items
    follow the attendance counts and are never set directly.
    """

    def __init__(self, settings: SalarySettings, period: Optional[Period] = None):
        self.settings = settings
        self.period = period or Period.current()
        self.reset()

    @property
    def is_edit(self) -> bool:
        return self.edit_id is not None

    def reset(self):
        """Start a fresh new-record session"""
        self.edit_id: Optional[str] = None
        self.earnings: Dict[EarningKey, Decimal] = default_earnings(self.settings)
        self.deductions: Dict[DeductionKey, Decimal] = default_deductions(self.settings)
        self.attendance = AttendanceInput()
        self._recompute()

    def load_record(self, record: SalaryRecord):
        """Switch to edit mode for an existing record"""
        self.edit_id = record.id
        self.period = record.period
        self.earnings = dict(record.earnings)
        self.deductions = dict(record.deductions)
        self.attendance = AttendanceInput(dict(record.attendance.days))
        self._recompute()

    def set_period(self, month: str, year: Any):
        self.period = Period(month=month, year=str(year))

    def set_earning(self, key: Any, value: Any):
        key = EarningKey(key)
        if key in DERIVED_EARNINGS:
            raise DerivedFieldError(f"{key.value} is computed and cannot be set")
        self.earnings[key] = to_decimal(value)

    def set_deduction(self, key: Any, value: Any):
        key = DeductionKey(key)
        if key in DERIVED_DEDUCTIONS:
            raise DerivedFieldError(f"{key.value} is computed and cannot be set")
        self.deductions[key] = to_decimal(value)

    def set_attendance(self, category: Any, days: Any):
        self.attendance = self.attendance.with_days(category, days)
        self._recompute()

    def on_settings_changed(self, settings: SalarySettings):
        """Refresh pre-fill (new mode only) and corrections for new settings"""
        self.settings = settings
        if not self.is_edit:
            prefill_earnings = default_earnings(settings)
            prefill_deductions = default_deductions(settings)
            for key in (EarningKey.BASE_PAY, EarningKey.ALLOWANCE):
                self.earnings[key] = prefill_earnings[key]
            for key in (DeductionKey.COOPERATIVE_SAVINGS, DeductionKey.SOCIAL_INSURANCE_1,
                        DeductionKey.SOCIAL_INSURANCE_2):
                self.deductions[key] = prefill_deductions[key]
        self._recompute()

    def _recompute(self):
        corrections = resolve_attendance(self.attendance, self.settings)
        self.earnings[EarningKey.POSITIVE_CORRECTION] = corrections.positive
        self.deductions[DeductionKey.NEGATIVE_CORRECTION] = corrections.negative

    @property
    def net_total(self) -> Decimal:
        return sum(self.earnings.values(), Decimal('0')) - sum(self.deductions.values(), Decimal('0'))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'edit_id': self.edit_id,
            'periode': str(self.period),
            'total': self.net_total,
            'detailMasuk': {k.value: v for k, v in self.earnings.items()},
            'detailPotong': {k.value: v for k, v in self.deductions.items()},
            'detailAbsensi': self.attendance.to_dict(),
        }
