from decimal import Decimal
from typing import Iterator, List, Optional, Sequence, Tuple
from models.payroll import PayrollDiff, SalaryRecord, Trend


def compare(current: SalaryRecord, previous: Optional[SalaryRecord]) -> PayrollDiff:
    """Deltas of current against previous; no deltas when there is no previous record"""
    if previous is None:
        return PayrollDiff(record_id=current.id)

    zero = Decimal('0')
    return PayrollDiff(
        record_id=current.id,
        previous_id=previous.id,
        net_delta=current.net_total - previous.net_total,
        earnings_delta={
            key: current.earnings.get(key, zero) - previous.earnings.get(key, zero)
            for key in current.earnings
        },
        deductions_delta={
            key: current.deductions.get(key, zero) - previous.deductions.get(key, zero)
            for key in current.deductions
        },
    )


def previous_in_history(history: Sequence[SalaryRecord], index: int) -> Optional[SalaryRecord]:
    """
    The record after ``index`` in the most-recent-first history.

    "Previous" is decided by list position only, not by period label, so an
    edited record keeps comparing against its neighbour.
    """
    if index + 1 < len(history):
        return history[index + 1]
    return None


def compare_history(history: Sequence[SalaryRecord]) -> Iterator[Tuple[SalaryRecord, PayrollDiff]]:
    for index, record in enumerate(history):
        yield record, compare(record, previous_in_history(history, index))


def earning_trend(delta: Optional[Decimal]) -> Trend:
    """More pay is better"""
    if not delta:
        return Trend.UNCHANGED
    return Trend.IMPROVED if delta > 0 else Trend.WORSENED


def deduction_trend(delta: Optional[Decimal]) -> Trend:
    """More deducted is worse"""
    if not delta:
        return Trend.UNCHANGED
    return Trend.WORSENED if delta > 0 else Trend.IMPROVED


class PeriodComparator:
    """Period-over-period comparison across a history list"""

    def __init__(self, history: Sequence[SalaryRecord]):
        self.history = history

    def index_of(self, record_id: str) -> int:
        for index, record in enumerate(self.history):
            if record.id == record_id:
                return index
        raise KeyError(record_id)

    def diff_for(self, record_id: str) -> PayrollDiff:
        index = self.index_of(record_id)
        return compare(self.history[index], previous_in_history(self.history, index))

    def all_diffs(self) -> List[PayrollDiff]:
        return [diff for _, diff in compare_history(self.history)]

    def trends(self, diff: PayrollDiff) -> dict:
        """Trend labels for the net total and every line item"""
        return {
            'net': earning_trend(diff.net_delta).value,
            'earnings': {k.value: earning_trend(v).value for k, v in diff.earnings_delta.items()},
            'deductions': {k.value: deduction_trend(v).value for k, v in diff.deductions_delta.items()},
        }
