import openpyxl
from openpyxl.styles import Font, Alignment, Border, Side
from pathlib import Path
from typing import Optional
from models.payroll import SalaryRecord, PayrollDiff
from processors.period_comparator import deduction_trend, earning_trend
from config.settings import OUTPUT_DIR

EARNING_LABELS = {
    'pokok': "GAJI POKOK",
    'transport': "TRANSPORT",
    'makan': "MAKAN",
    'premi': "PREMI",
    'koreksi_plus': "KOREKSI (+)",
}

DEDUCTION_LABELS = {
    'cicilan_hutang': "CICILAN HUTANG",
    'ksp': "KSP",
    'jamsostek': "JAMSOSTEK",
    'bpjs': "BPJS",
    'koreksi_minus': "KOREKSI (-)",
}

TREND_FONTS = {
    'improved': Font(color="27AE60"),
    'worsened': Font(color="E74C3C"),
}


class PayslipGenerator:
    """Generate a salary slip Excel file for one record"""

    def __init__(self, output_dir: Optional[Path] = None):
        self.output_dir = Path(output_dir) if output_dir else OUTPUT_DIR / "payslips"
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def generate(self, record: SalaryRecord, diff: Optional[PayrollDiff] = None) -> str:
        """Generate payslip Excel file, with deltas when a previous record exists"""

        # Create workbook
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = "Slip Gaji"

        # Set column widths
        ws.column_dimensions['A'].width = 25
        ws.column_dimensions['B'].width = 18
        ws.column_dimensions['C'].width = 18

        # Define styles
        header_font = Font(bold=True, size=12)
        bold_font = Font(bold=True)
        thin_border = Border(
            left=Side(style='thin'),
            right=Side(style='thin'),
            top=Side(style='thin'),
            bottom=Side(style='thin')
        )
        show_delta = diff is not None and diff.has_previous

        # Header section
        row = 1
        ws.merge_cells(f'A{row}:C{row}')
        ws[f'A{row}'] = "SLIP GAJI"
        ws[f'A{row}'].font = header_font
        ws[f'A{row}'].alignment = Alignment(horizontal='center')

        row = 2
        ws[f'A{row}'] = "Periode"
        ws[f'B{row}'] = str(record.period)

        row = 3
        ws[f'A{row}'] = "Nomor"
        ws[f'B{row}'] = record.id

        # Line item tables
        row = 5
        for title, items, labels, trend, deltas in (
            ("PEMASUKAN", record.earnings, EARNING_LABELS, earning_trend,
             diff.earnings_delta if show_delta else {}),
            ("POTONGAN", record.deductions, DEDUCTION_LABELS, deduction_trend,
             diff.deductions_delta if show_delta else {}),
        ):
            ws[f'A{row}'] = title
            ws[f'B{row}'] = "Jumlah"
            if show_delta:
                ws[f'C{row}'] = "Selisih"
            for cell in [f'A{row}', f'B{row}', f'C{row}']:
                ws[cell].font = bold_font
                ws[cell].border = thin_border
            row += 1

            for key, amount in items.items():
                ws[f'A{row}'] = labels.get(key.value, key.value)
                ws[f'B{row}'] = float(amount)
                ws[f'B{row}'].number_format = '#,##0'
                delta = deltas.get(key)
                if show_delta and delta:
                    ws[f'C{row}'] = float(delta)
                    ws[f'C{row}'].number_format = '+#,##0;-#,##0'
                    font = TREND_FONTS.get(trend(delta).value)
                    if font:
                        ws[f'C{row}'].font = font
                row += 1
            row += 1

        # Attendance
        ws[f'A{row}'] = "ABSENSI (HARI)"
        ws[f'A{row}'].font = bold_font
        row += 1
        for category, days in record.attendance.to_dict().items():
            ws[f'A{row}'] = category.upper()
            ws[f'B{row}'] = float(days)
            row += 1
        row += 1

        # Net payment
        ws[f'A{row}'] = "TOTAL DITERIMA"
        ws[f'A{row}'].font = Font(bold=True, size=14)
        ws[f'B{row}'] = float(record.net_total)
        ws[f'B{row}'].number_format = '#,##0'
        ws[f'B{row}'].font = Font(bold=True, size=14)
        if show_delta:
            ws[f'C{row}'] = float(diff.net_delta)
            ws[f'C{row}'].number_format = '+#,##0;-#,##0'
            font = TREND_FONTS.get(earning_trend(diff.net_delta).value)
            if font:
                ws[f'C{row}'].font = font

        # Generate filename
        filename = f"slip_{record.period.year}_{record.period.month}_{record.id}.xlsx"
        filepath = self.output_dir / filename

        # Save workbook
        wb.save(filepath)

        return str(filepath)
