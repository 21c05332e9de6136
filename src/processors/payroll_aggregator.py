import logging
import time
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional
from config.settings import BASE_PAY_DAYS
from models.payroll import (
    AttendanceInput, DeductionKey, EarningKey, Period, SalaryRecord, breakdown
)
from models.settings import SalarySettings
from processors.attendance_resolver import resolve_attendance

logger = logging.getLogger(__name__)


def new_record_id() -> str:
    """Timestamp-based id in milliseconds"""
    return str(int(time.time() * 1000))


def base_pay(settings: SalarySettings) -> Decimal:
    return settings.daily_rate * BASE_PAY_DAYS


def default_earnings(settings: SalarySettings) -> Dict[EarningKey, Decimal]:
    """Earnings pre-fill for a brand-new slip"""
    earnings = breakdown(EarningKey, None)
    earnings[EarningKey.BASE_PAY] = base_pay(settings)
    earnings[EarningKey.ALLOWANCE] = settings.fixed_allowance
    return earnings


def default_deductions(settings: SalarySettings) -> Dict[DeductionKey, Decimal]:
    """Deductions pre-fill for a brand-new slip"""
    deductions = breakdown(DeductionKey, None)
    deductions[DeductionKey.COOPERATIVE_SAVINGS] = settings.cooperative_savings
    deductions[DeductionKey.SOCIAL_INSURANCE_1] = settings.social_insurance_1
    deductions[DeductionKey.SOCIAL_INSURANCE_2] = settings.social_insurance_2
    return deductions


def build_record(record_id: Optional[str], period: Period,
                 earnings: Mapping[Any, Any], deductions: Mapping[Any, Any],
                 attendance: AttendanceInput) -> SalaryRecord:
    """Assemble a record and compute its net total; a missing id gets a fresh one"""
    earnings = breakdown(EarningKey, earnings)
    deductions = breakdown(DeductionKey, deductions)
    net_total = sum(earnings.values(), Decimal('0')) - sum(deductions.values(), Decimal('0'))
    return SalaryRecord(
        id=record_id or new_record_id(),
        period=period,
        net_total=net_total,
        earnings=earnings,
        deductions=deductions,
        attendance=attendance,
    )


class PayrollAggregator:
    """Build salary records against the current settings"""

    def __init__(self, settings: SalarySettings):
        self.settings = settings

    def apply_corrections(self, earnings: Mapping[Any, Any], deductions: Mapping[Any, Any],
                          attendance: AttendanceInput):
        """Overwrite the correction line items with values resolved from attendance"""
        corrections = resolve_attendance(attendance, self.settings)
        earnings = breakdown(EarningKey, earnings)
        deductions = breakdown(DeductionKey, deductions)
        earnings[EarningKey.POSITIVE_CORRECTION] = corrections.positive
        deductions[DeductionKey.NEGATIVE_CORRECTION] = corrections.negative
        return earnings, deductions

    def build(self, record_id: Optional[str], period: Period,
              earnings: Mapping[Any, Any], deductions: Mapping[Any, Any],
              attendance: AttendanceInput) -> SalaryRecord:
        earnings, deductions = self.apply_corrections(earnings, deductions, attendance)
        record = build_record(record_id, period, earnings, deductions, attendance)
        logger.debug(f"Built record {record.id} for {record.period}: net {record.net_total}")
        return record
