import logging
import weakref
from typing import Any, Callable, List, Optional, Tuple
from api.backup import export_backup, parse_backup
from database.repository import RecordStore
from models.errors import DuplicateRecordError, RecordNotFoundError
from models.payroll import PayrollDiff, SalaryRecord
from models.settings import SalarySettings
from processors.payroll_aggregator import PayrollAggregator, new_record_id
from processors.period_comparator import PeriodComparator, compare_history
from controllers.slip_form import SlipForm

logger = logging.getLogger(__name__)


class PayrollController:
    """
    Owner of the salary history and settings.

    Every mutation is written to the store first; the in-memory state is only
    replaced once the write succeeded, so a PersistenceError leaves it as it
    was. Callers must not run mutations concurrently on one controller.
    """

    def __init__(self, store: RecordStore, history: Optional[List[SalaryRecord]] = None,
                 settings: Optional[SalarySettings] = None):
        self.store = store
        self._history: List[SalaryRecord] = list(history or [])
        self._settings = settings or SalarySettings()
        self._forms = weakref.WeakSet()
        self._listeners: List[Callable[[SalarySettings], None]] = []

    @classmethod
    def load(cls, store: RecordStore) -> 'PayrollController':
        history, settings = store.load()
        return cls(store, history, settings)

    @property
    def history(self) -> Tuple[SalaryRecord, ...]:
        return tuple(self._history)

    @property
    def settings(self) -> SalarySettings:
        return self._settings

    # ========== Records ==========

    def list_records(self) -> List[SalaryRecord]:
        return list(self._history)

    def get_record(self, record_id: str) -> SalaryRecord:
        for record in self._history:
            if record.id == record_id:
                return record
        raise RecordNotFoundError(record_id)

    def build_record(self, record_id, period, earnings, deductions, attendance) -> SalaryRecord:
        """Build a record with corrections resolved against current settings"""
        return PayrollAggregator(self._settings).build(record_id, period, earnings, deductions, attendance)

    def create_record(self, record: SalaryRecord) -> SalaryRecord:
        """Prepend a new record, making it the most recent"""
        if any(r.id == record.id for r in self._history):
            raise DuplicateRecordError(record.id)
        new_history = [record] + self._history
        self.store.save_history(new_history)
        self._history = new_history
        logger.info(f"Saved record {record.id} for {record.period}")
        return record

    def update_record(self, record: SalaryRecord) -> SalaryRecord:
        """Replace a record by id, keeping its position"""
        index = self._index_of(record.id)
        new_history = list(self._history)
        new_history[index] = record
        self.store.save_history(new_history)
        self._history = new_history
        logger.info(f"Updated record {record.id}")
        return record

    def clear_history(self):
        self.store.clear_history()
        self._history = []

    # ========== Comparison ==========

    def compare_record(self, record_id: str) -> PayrollDiff:
        """Diff a record against the next one in history (list position)"""
        self._index_of(record_id)
        return PeriodComparator(self._history).diff_for(record_id)

    def history_with_diffs(self) -> List[Tuple[SalaryRecord, PayrollDiff]]:
        return list(compare_history(self._history))

    # ========== Settings ==========

    def update_setting(self, name: str, value: Any) -> SalarySettings:
        return self._replace_settings(self._settings.with_field(name, value))

    def update_multiplier(self, category: Any, value: Any) -> SalarySettings:
        return self._replace_settings(self._settings.with_multiplier(category, value))

    def subscribe(self, listener: Callable[[SalarySettings], None]):
        """Call listener with the new settings after every change"""
        self._listeners.append(listener)

    def _replace_settings(self, settings: SalarySettings) -> SalarySettings:
        self.store.save_settings(settings)
        self._settings = settings
        self._notify(settings)
        return settings

    def _notify(self, settings: SalarySettings):
        for form in list(self._forms):
            form.on_settings_changed(settings)
        for listener in self._listeners:
            listener(settings)

    # ========== Backup ==========

    def restore(self, history: List[SalaryRecord], settings: SalarySettings):
        """Replace both history and settings, or neither"""
        self.store.replace_all(history, settings)
        self._history = list(history)
        self._settings = settings
        self._notify(settings)

    def export_backup(self) -> str:
        return export_backup(self._history, self._settings)

    def import_backup(self, text: str):
        history, settings = parse_backup(text)
        self.restore(history, settings)
        logger.info(f"Imported backup with {len(history)} records")

    # ========== Forms ==========

    def new_form(self) -> SlipForm:
        form = SlipForm(self._settings)
        self._forms.add(form)
        return form

    def edit_form(self, record_id: str) -> SlipForm:
        form = self.new_form()
        form.load_record(self.get_record(record_id))
        return form

    def submit_form(self, form: SlipForm) -> SalaryRecord:
        """Save the form as a new record or as an update, then reset it"""
        record = self.build_record(form.edit_id or self._fresh_id(), form.period, form.earnings,
                                   form.deductions, form.attendance)
        if form.is_edit:
            self.update_record(record)
        else:
            self.create_record(record)
        form.reset()
        return record

    def _fresh_id(self) -> str:
        """Timestamp id, bumped past any id already in history"""
        taken = {r.id for r in self._history}
        candidate = new_record_id()
        while candidate in taken:
            candidate = str(int(candidate) + 1)
        return candidate

    def _index_of(self, record_id: str) -> int:
        for index, record in enumerate(self._history):
            if record.id == record_id:
                return index
        raise RecordNotFoundError(record_id)
