from decimal import Decimal
from pathlib import Path

import openpyxl
import pytest

from models.payroll import AttendanceInput, DeductionKey, EarningKey, Period
from processors.history_report_generator import HistoryReportGenerator
from processors.payroll_aggregator import build_record
from processors.payslip_generator import PayslipGenerator
from processors.period_comparator import compare


@pytest.fixture
def records():
    feb = build_record("2", Period("Februari", "2025"),
                       {EarningKey.BASE_PAY: Decimal('5000000')},
                       {DeductionKey.LOAN_INSTALLMENT: Decimal('300000')}, AttendanceInput())
    jan = build_record("1", Period("Januari", "2025"),
                       {EarningKey.BASE_PAY: Decimal('4500000')},
                       {DeductionKey.LOAN_INSTALLMENT: Decimal('200000')}, AttendanceInput())
    return [feb, jan]


def find_row(ws, label):
    for row in ws.iter_rows(min_col=1, max_col=3):
        if row[0].value == label:
            return row
    raise AssertionError(f"{label} not found")


def test_payslip_with_deltas(records, tmp_path):
    feb, jan = records
    path = PayslipGenerator(tmp_path).generate(feb, compare(feb, jan))
    assert Path(path).exists()

    ws = openpyxl.load_workbook(path).active
    assert ws['A1'].value == "SLIP GAJI"
    assert ws['B2'].value == "Februari 2025"
    assert find_row(ws, "GAJI POKOK")[2].value == 500000
    assert find_row(ws, "CICILAN HUTANG")[2].value == 100000
    total = find_row(ws, "TOTAL DITERIMA")
    assert total[1].value == 4700000
    assert total[2].value == 400000


def test_payslip_without_previous_has_no_deltas(records, tmp_path):
    jan = records[1]
    path = PayslipGenerator(tmp_path).generate(jan, compare(jan, None))
    ws = openpyxl.load_workbook(path).active
    assert find_row(ws, "TOTAL DITERIMA")[2].value is None
    assert find_row(ws, "GAJI POKOK")[2].value is None


def test_history_report(records, tmp_path):
    path = HistoryReportGenerator(tmp_path).generate(records)
    ws = openpyxl.load_workbook(path).active
    assert ws['A1'].value == "Periode"
    assert ws['A2'].value == "Februari 2025"
    assert ws['D2'].value == 4700000
    assert ws['E2'].value == 400000
    assert ws['F2'].value == "improved"
    assert ws['A3'].value == "Januari 2025"
    assert ws['E3'].value is None


def test_history_report_needs_records(tmp_path):
    with pytest.raises(ValueError):
        HistoryReportGenerator(tmp_path).generate([])
