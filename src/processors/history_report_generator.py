import openpyxl
from openpyxl.styles import Font, Alignment, Border, Side, PatternFill
from pathlib import Path
from typing import Optional, Sequence
from datetime import datetime
from models.payroll import SalaryRecord
from processors.period_comparator import compare_history, earning_trend
from config.settings import OUTPUT_DIR


class HistoryReportGenerator:
    """Generate the history summary: every slip with its net total and change"""

    def __init__(self, output_dir: Optional[Path] = None):
        self.output_dir = Path(output_dir) if output_dir else OUTPUT_DIR / "reports"
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def generate(self, history: Sequence[SalaryRecord]) -> str:
        """Generate history summary Excel file, most recent slip first"""

        if not history:
            raise ValueError("No salary records to report")

        # Create workbook
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = "Rangkuman"

        # Set column widths
        for col, width in zip("ABCDEF", (18, 18, 18, 18, 18, 12)):
            ws.column_dimensions[col].width = width

        # Define styles
        bold_font = Font(bold=True)
        header_fill = PatternFill(start_color="B4C7E7", end_color="B4C7E7", fill_type="solid")
        thin_border = Border(
            left=Side(style='thin'),
            right=Side(style='thin'),
            top=Side(style='thin'),
            bottom=Side(style='thin')
        )

        # Header row
        row = 1
        headers = ["Periode", "Pemasukan", "Potongan", "Total", "Selisih", "Tren"]
        for col, title in enumerate(headers, start=1):
            cell = ws.cell(row=row, column=col, value=title)
            cell.font = bold_font
            cell.fill = header_fill
            cell.border = thin_border
            cell.alignment = Alignment(horizontal='center', vertical='center')

        # Data rows
        row = 2
        for record, diff in compare_history(history):
            ws[f'A{row}'] = str(record.period)
            ws[f'B{row}'] = float(record.total_earnings)
            ws[f'C{row}'] = float(record.total_deductions)
            ws[f'D{row}'] = float(record.net_total)
            if diff.has_previous:
                ws[f'E{row}'] = float(diff.net_delta)
                ws[f'F{row}'] = earning_trend(diff.net_delta).value

            # Apply borders
            for col in range(1, 7):
                ws.cell(row=row, column=col).border = thin_border

            # Number formatting
            for col in ['B', 'C', 'D']:
                ws[f'{col}{row}'].number_format = '#,##0'
            ws[f'E{row}'].number_format = '+#,##0;-#,##0'

            row += 1

        # Generate filename
        filename = f"rangkuman_gaji_{datetime.now().strftime('%Y%m%d_%H%M%S')}.xlsx"
        filepath = self.output_dir / filename

        # Save workbook
        wb.save(filepath)

        return str(filepath)
