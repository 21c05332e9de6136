from .attendance_resolver import AttendanceCorrections, resolve_attendance
from .payroll_aggregator import PayrollAggregator, build_record, default_deductions, default_earnings
from .period_comparator import PeriodComparator, compare, compare_history, previous_in_history
from .payslip_generator import PayslipGenerator
from .history_report_generator import HistoryReportGenerator


__all__ = [
    'AttendanceCorrections',
    'resolve_attendance',
    'PayrollAggregator',
    'build_record',
    'default_deductions',
    'default_earnings',
    'PeriodComparator',
    'compare',
    'compare_history',
    'previous_in_history',
    'PayslipGenerator',
    'HistoryReportGenerator'
]
