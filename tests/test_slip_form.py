from decimal import Decimal

import pytest

from controllers import SlipForm
from models.errors import DerivedFieldError
from models.payroll import DeductionKey, EarningKey, Period
from models.settings import AttendanceCategory
from processors.payroll_aggregator import build_record


def test_new_form_is_prefilled(settings):
    form = SlipForm(settings, Period("Januari", "2025"))
    assert not form.is_edit
    assert form.earnings[EarningKey.BASE_PAY] == Decimal('5000000')
    assert form.earnings[EarningKey.ALLOWANCE] == Decimal('250000')
    assert form.deductions[DeductionKey.COOPERATIVE_SAVINGS] == Decimal('50000')
    assert form.net_total == Decimal('5130000')


def test_default_period_is_current_month(settings):
    form = SlipForm(settings)
    assert form.period == Period.current()


def test_computed_items_cannot_be_set(settings):
    form = SlipForm(settings)
    with pytest.raises(DerivedFieldError):
        form.set_earning(EarningKey.POSITIVE_CORRECTION, 1)
    with pytest.raises(DerivedFieldError):
        form.set_earning('pokok', 1)
    with pytest.raises(DerivedFieldError):
        form.set_deduction(DeductionKey.NEGATIVE_CORRECTION, 1)


def test_attendance_drives_corrections(settings):
    form = SlipForm(settings)
    form.set_attendance(AttendanceCategory.OVERTIME, 7)
    form.set_attendance('terlambat', 2)
    assert form.earnings[EarningKey.POSITIVE_CORRECTION] == Decimal('150000')
    assert form.deductions[DeductionKey.NEGATIVE_CORRECTION] == Decimal('1000')
    form.set_attendance(AttendanceCategory.OVERTIME, 0)
    assert form.earnings[EarningKey.POSITIVE_CORRECTION] == Decimal('0')


def test_edit_form_keeps_record_values_on_settings_change(settings):
    record = build_record("x", Period("Maret", "2024"),
                          {EarningKey.BASE_PAY: Decimal('4000000')}, {},
                          SlipForm(settings).attendance.with_days('sakit', 1))
    form = SlipForm(settings)
    form.load_record(record)
    assert form.edit_id == "x"
    assert form.period == Period("Maret", "2024")
    assert form.deductions[DeductionKey.NEGATIVE_CORRECTION] == Decimal('100000')

    form.on_settings_changed(settings.with_field('harian', 200000))
    assert form.earnings[EarningKey.BASE_PAY] == Decimal('4000000')
    assert form.deductions[DeductionKey.NEGATIVE_CORRECTION] == Decimal('200000')


def test_invalid_period_is_rejected(settings):
    form = SlipForm(settings)
    with pytest.raises(ValueError):
        form.set_period("Smarch", "2025")
