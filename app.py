from flask import Flask, request, jsonify, send_file
from flask.json.provider import DefaultJSONProvider
from pathlib import Path
from decimal import Decimal
import sys, os
import logging

sys.path.insert(0, str(Path(__file__).parent / 'src'))

from controllers import PayrollController, SlipForm
from database.db import init_db
from database.repository import RecordStore
from models.errors import BackupFormatError, PersistenceError, RecordNotFoundError
from models.payroll import DERIVED_DEDUCTIONS, DERIVED_EARNINGS, DeductionKey, EarningKey, SalaryRecord
from models.settings import AttendanceCategory
from processors.history_report_generator import HistoryReportGenerator
from processors.payslip_generator import PayslipGenerator
from processors.period_comparator import PeriodComparator
from utils.formatters import parse_thousands, to_decimal
from utils.json_codec import to_json_number
from config.settings import OUTPUT_DIR, SECRET_KEY, DEBUG, LOG_LEVEL

logger = logging.getLogger(__name__)


class PayrollJSONProvider(DefaultJSONProvider):
    """Serialize Decimal amounts as JSON numbers"""

    @staticmethod
    def default(o):
        if isinstance(o, Decimal):
            return to_json_number(o)
        return DefaultJSONProvider.default(o)


def _amount(value):
    """Grouped text ('1.250.000') or a plain number"""
    if isinstance(value, str):
        return parse_thousands(value)
    return to_decimal(value)


def _confirmed() -> bool:
    if request.args.get('confirm', '').lower() == 'true':
        return True
    data = request.get_json(silent=True) or {}
    return data.get('confirm') is True


def _section(data: dict, name: str) -> dict:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ValueError(f"{name} must be an object")
    return section


def _apply_form_data(form: SlipForm, data: dict):
    """Copy editable fields from a request body onto a form; computed items are skipped"""
    if data.get('periode'):
        month, _, year = str(data['periode']).partition(' ')
        form.set_period(month, year)
    elif data.get('month') and data.get('year'):
        form.set_period(data['month'], data['year'])

    for key, value in _section(data, 'detailMasuk').items():
        key = EarningKey(key)
        if key not in DERIVED_EARNINGS:
            form.set_earning(key, _amount(value))
    for key, value in _section(data, 'detailPotong').items():
        key = DeductionKey(key)
        if key not in DERIVED_DEDUCTIONS:
            form.set_deduction(key, _amount(value))
    for category, days in _section(data, 'detailAbsensi').items():
        form.set_attendance(AttendanceCategory(category), to_decimal(days))


def create_app(controller: PayrollController = None, output_dir: Path = None) -> Flask:
    """Create the Flask app around one controller"""
    app = Flask(__name__)
    app.json = PayrollJSONProvider(app)
    app.config['SECRET_KEY'] = SECRET_KEY
    app.config['DEBUG'] = DEBUG

    if controller is None:
        init_db()
        controller = PayrollController.load(RecordStore())
    app.extensions['payroll_controller'] = controller
    output_dir = Path(output_dir) if output_dir else OUTPUT_DIR

    def record_payload(record: SalaryRecord, comparator: PeriodComparator) -> dict:
        diff = comparator.diff_for(record.id)
        payload = record.to_dict()
        payload['diff'] = diff.to_dict() if diff.has_previous else None
        payload['trends'] = comparator.trends(diff) if diff.has_previous else None
        return payload

    # ============================================================================
    # Error handlers
    # ============================================================================

    @app.errorhandler(RecordNotFoundError)
    def handle_not_found(e):
        return jsonify({'success': False, 'message': str(e)}), 404

    @app.errorhandler(BackupFormatError)
    def handle_backup_format(e):
        return jsonify({'success': False, 'message': str(e)}), 400

    @app.errorhandler(ValueError)
    def handle_bad_input(e):
        return jsonify({'success': False, 'message': str(e)}), 400

    @app.errorhandler(PersistenceError)
    def handle_persistence(e):
        logger.error(f"Persistence failure: {e}")
        return jsonify({'success': False, 'message': str(e)}), 503

    # ============================================================================
    # Records
    # ============================================================================

    @app.route('/api/records')
    def list_records():
        """History, most recent first, with change against the previous slip"""
        history = controller.list_records()
        comparator = PeriodComparator(history)
        return jsonify({
            'success': True,
            'records': [record_payload(r, comparator) for r in history]
        })

    @app.route('/api/records/<record_id>')
    def get_record(record_id):
        record = controller.get_record(record_id)
        comparator = PeriodComparator(controller.list_records())
        return jsonify({'success': True, 'record': record_payload(record, comparator)})

    @app.route('/api/records', methods=['POST'])
    def create_record():
        form = controller.new_form()
        _apply_form_data(form, request.get_json() or {})
        record = controller.submit_form(form)
        return jsonify({
            'success': True,
            'message': 'Data tersimpan!',
            'record': record.to_dict()
        }), 201

    @app.route('/api/records/<record_id>', methods=['PUT'])
    def update_record(record_id):
        form = controller.edit_form(record_id)
        _apply_form_data(form, request.get_json() or {})
        record = controller.submit_form(form)
        return jsonify({
            'success': True,
            'message': 'Data diperbarui!',
            'record': record.to_dict()
        })

    @app.route('/api/records', methods=['DELETE'])
    def clear_records():
        if not _confirmed():
            return jsonify({'success': False, 'message': 'Hapus semua data? Kirim confirm=true.'}), 409
        controller.clear_history()
        return jsonify({'success': True, 'message': 'Semua data dihapus'})

    @app.route('/api/preview', methods=['POST'])
    def preview_record():
        """Resolve corrections and totals for a draft without saving it"""
        data = request.get_json() or {}
        form = controller.edit_form(data['edit_id']) if data.get('edit_id') else controller.new_form()
        _apply_form_data(form, data)
        return jsonify({'success': True, 'form': form.to_dict()})

    # ============================================================================
    # Settings
    # ============================================================================

    @app.route('/api/settings')
    def get_settings():
        return jsonify({'success': True, 'settings': controller.settings.to_dict()})

    @app.route('/api/settings', methods=['PATCH'])
    def update_settings():
        data = request.get_json() or {}
        multipliers = _section(data, 'persen')
        fields = {name: _amount(value) for name, value in data.items() if name != 'persen'}
        # Reject the whole request before anything is written
        pending = controller.settings
        for name, value in fields.items():
            pending = pending.with_field(name, value)
        for category, multiplier in multipliers.items():
            pending = pending.with_multiplier(category, to_decimal(multiplier))

        for name, value in fields.items():
            controller.update_setting(name, value)
        for category, multiplier in multipliers.items():
            controller.update_multiplier(category, to_decimal(multiplier))
        return jsonify({'success': True, 'settings': controller.settings.to_dict()})

    @app.route('/api/settings/multipliers', methods=['PATCH'])
    def update_multipliers():
        data = request.get_json() or {}
        pending = controller.settings
        for category, multiplier in data.items():
            pending = pending.with_multiplier(category, to_decimal(multiplier))
        for category, multiplier in data.items():
            controller.update_multiplier(category, to_decimal(multiplier))
        return jsonify({'success': True, 'settings': controller.settings.to_dict()})

    # ============================================================================
    # Backup
    # ============================================================================

    @app.route('/api/backup')
    def export_backup():
        return jsonify({'success': True, 'backup': controller.export_backup()})

    @app.route('/api/backup', methods=['POST'])
    def import_backup():
        """Replace all data from backup text; requires confirm"""
        data = request.get_json() or {}
        if not data.get('backup'):
            return jsonify({'success': False, 'message': 'Tempel kode backup dulu.'}), 400
        if not _confirmed():
            return jsonify({'success': False, 'message': 'Data sekarang akan ditimpa. Kirim confirm=true.'}), 409
        controller.import_backup(data['backup'])
        return jsonify({'success': True, 'message': 'Data dipulihkan!'})

    # ============================================================================
    # Downloads
    # ============================================================================

    @app.route('/api/records/<record_id>/payslip')
    def download_payslip(record_id):
        record = controller.get_record(record_id)
        diff = controller.compare_record(record_id)
        filepath = PayslipGenerator(output_dir / 'payslips').generate(record, diff)
        return send_file(filepath, as_attachment=True)

    @app.route('/api/report/history')
    def download_history_report():
        history = controller.list_records()
        if not history:
            return jsonify({'success': False, 'message': 'Belum ada data'}), 404
        filepath = HistoryReportGenerator(output_dir / 'reports').generate(history)
        return send_file(filepath, as_attachment=True)

    return app


if __name__ == '__main__':
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    port = int(os.getenv('PORT', 5000))
    create_app().run(host='0.0.0.0', port=port)
