from dataclasses import dataclass
from decimal import Decimal
from config.settings import OVERTIME_HOURS_PER_DAY
from models.payroll import AttendanceInput
from models.settings import AttendanceCategory, SalarySettings


@dataclass(frozen=True)
class AttendanceCorrections:
    """Corrections derived from attendance counts"""
    positive: Decimal
    negative: Decimal


def resolve_attendance(attendance: AttendanceInput, settings: SalarySettings) -> AttendanceCorrections:
    """
    Convert attendance day counts into the two correction line items.

    Sick, excused and unexcused days cost a daily rate each, scaled by their
    multiplier; lateness is a flat penalty per occurrence. Overtime is paid at
    an hourly equivalent of the daily rate, extra shifts at the daily rate and
    incentive days at a flat amount. Leave has no effect.
    """
    rate = settings.daily_rate
    mult = settings.multiplier
    days = attendance.days

    negative = (
        days[AttendanceCategory.SICK] * rate * mult(AttendanceCategory.SICK)
        + days[AttendanceCategory.EXCUSED] * rate * mult(AttendanceCategory.EXCUSED)
        + days[AttendanceCategory.UNEXCUSED_ABSENCE] * rate * mult(AttendanceCategory.UNEXCUSED_ABSENCE)
        + days[AttendanceCategory.LATENESS] * mult(AttendanceCategory.LATENESS)
    )

    # divide last so whole-number rates stay exact
    positive = (
        days[AttendanceCategory.OVERTIME] * rate * mult(AttendanceCategory.OVERTIME)
        / Decimal(OVERTIME_HOURS_PER_DAY)
        + days[AttendanceCategory.EXTRA_SHIFT] * rate * mult(AttendanceCategory.EXTRA_SHIFT)
        + days[AttendanceCategory.INCENTIVE] * mult(AttendanceCategory.INCENTIVE)
    )

    return AttendanceCorrections(positive=positive, negative=negative)
